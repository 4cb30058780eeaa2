import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(help_text='The date the expense was incurred.')),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('description', models.CharField(max_length=255)),
                ('supplier', models.CharField(blank=True, max_length=200)),
                ('receipt', models.TextField(blank=True, help_text='Invoice number or a link to the receipt.')),
                ('category', models.CharField(choices=[('material', 'Construction Material'), ('labor', 'Labor'), ('equipment', 'Equipment / Tools'), ('services', 'Outsourced Services'), ('documentation', 'Documentation'), ('other', 'Other')], default='material', max_length=20)),
                ('status', models.CharField(choices=[('paid', 'Paid'), ('pending', 'Pending')], default='pending', max_length=10)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('material_name', models.CharField(blank=True, max_length=200)),
                ('quantity', models.DecimalField(blank=True, decimal_places=3, max_digits=14, null=True)),
                ('unit_price', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('unit', models.CharField(blank=True, help_text='e.g. bag, m³, unit', max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='projects.project')),
            ],
            options={
                'ordering': ['-date', '-created_at'],
            },
        ),
    ]
