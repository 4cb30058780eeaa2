from django.core.management.base import BaseCommand, CommandError

from inventory.services import InventoryService
from projects.models import Project


class Command(BaseCommand):
    help = ('Compares every inventory line with the material expenses that feed it and, '
            'with --fix, rewrites the lines to match.')

    def add_arguments(self, parser):
        parser.add_argument('--project', type=int, help='Only reconcile the project with this id.')
        parser.add_argument('--fix', action='store_true', help='Write the recomputed quantities and average prices.')

    def handle(self, *args, **options):
        projects = Project.objects.all()
        if options['project'] is not None:
            projects = projects.filter(pk=options['project'])
            if not projects.exists():
                raise CommandError(f"Project {options['project']} does not exist.")

        self.stdout.write(self.style.NOTICE('Starting inventory reconciliation...'))
        fix = options['fix']
        total = 0

        for project in projects:
            discrepancies = InventoryService.rebuild_project_inventory(project, commit=fix)
            total += len(discrepancies)

            for d in discrepancies:
                self.stdout.write(
                    self.style.WARNING(
                        f'Discrepancy for "{d.name}" in "{project.name}": '
                        f'stored {d.stored_quantity} {d.unit} @ {d.stored_average_price:.4f}, '
                        f'expenses add up to {d.expected_quantity} {d.unit} @ {d.expected_average_price:.4f}.'
                    )
                )
                if fix:
                    self.stdout.write(
                        self.style.SUCCESS(f'---> "{d.name}" in "{project.name}" updated.')
                    )

        if total == 0:
            self.stdout.write(self.style.SUCCESS('Inventory matches the material expenses.'))
        elif fix:
            self.stdout.write(self.style.SUCCESS(f'Inventory reconciliation completed: {total} line(s) fixed.'))
        else:
            self.stdout.write(self.style.WARNING(f'{total} discrepancy(ies) found. Run again with --fix to correct them.'))
