from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='inventoryitem',
            name='average_price',
            field=models.DecimalField(decimal_places=8, default=0, max_digits=20),
        ),
    ]
