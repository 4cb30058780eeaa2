# projects/management/commands/seed_demo_data.py

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import User
from finance.models import Expense
from finance.services import ExpenseService
from projects.models import Project
from schedule.models import Task
from team.models import Employee

PROJECTS = [
    {
        'name': 'Residencial Vista Verde',
        'address': 'Rua das Flores, 123, São Paulo, SP',
        'client': 'Construtora Sol',
        'start_date': date(2024, 5, 1),
        'end_date': date(2025, 5, 1),
        'status': Project.IN_PROGRESS,
        'total_budget': Decimal('500000'),
        'description': 'Construction of a 10-storey residential building.',
    },
    {
        'name': 'Centro Comercial Plaza',
        'address': 'Avenida Principal, 456, Rio de Janeiro, RJ',
        'client': 'Investimentos Urbanos',
        'start_date': date(2024, 8, 15),
        'end_date': date(2025, 12, 20),
        'status': Project.PLANNING,
        'total_budget': Decimal('1200000'),
        'description': 'New shopping centre with 50 stores and a food court.',
    },
    {
        'name': 'Reforma Escritório Central',
        'address': 'Rua do Comércio, 789, Belo Horizonte, MG',
        'client': 'Tech Solutions Inc.',
        'start_date': date(2024, 3, 10),
        'end_date': date(2024, 7, 30),
        'status': Project.COMPLETED,
        'total_budget': Decimal('150000'),
        'description': 'Full refurbishment of the 5th floor of the office building.',
    },
]

# (name, role, phone, email, salary, project indexes, status)
EMPLOYEES = [
    ('Carlos Silva', 'Civil Engineer', '(11) 98765-4321', 'carlos.silva@buildwise.com', '8500', [0], Employee.ACTIVE),
    ('Mariana Costa', 'Architect', '(21) 91234-5678', 'mariana.costa@buildwise.com', '7800', [0, 1], Employee.ACTIVE),
    ('João Pereira', 'Site Foreman', '(31) 99999-8888', 'joao.pereira@buildwise.com', '4500', [2], Employee.INACTIVE),
]

EXPENSES = [
    {
        'project': 0, 'date': date(2024, 6, 10), 'description': 'Cement and sand purchase',
        'amount': Decimal('15000'), 'category': Expense.MATERIAL, 'receipt': 'invoice-123.pdf',
        'supplier': 'Casa do Construtor', 'status': Expense.PAID, 'payment_date': date(2024, 6, 10),
        'material_name': 'Cimento', 'quantity': Decimal('300'), 'unit_price': Decimal('50'), 'unit': 'bag',
    },
    {
        'project': 0, 'date': date(2024, 6, 12), 'description': 'Bricklayer crew payment',
        'amount': Decimal('25000'), 'category': Expense.LABOR, 'receipt': 'payment-receipt-jun.pdf',
        'supplier': 'Empreiteira Mão na Massa', 'status': Expense.PAID, 'payment_date': date(2024, 6, 12),
    },
    {
        'project': 0, 'date': date(2024, 6, 20), 'description': 'Concrete mixer rental',
        'amount': Decimal('2500'), 'category': Expense.EQUIPMENT, 'receipt': 'rental-receipt.pdf',
        'supplier': 'AlugaTudo Máquinas', 'status': Expense.PENDING,
    },
]

# (project index, name, start, end, status, responsible, priority)
TASKS = [
    (0, 'Foundation', date(2024, 5, 10), date(2024, 6, 20), Task.IN_PROGRESS, 'Carlos Silva', 'high'),
    (0, 'Wall raising', date(2024, 6, 21), date(2024, 8, 30), Task.NOT_STARTED, 'João Pereira', 'high'),
    (1, 'Architectural design', date(2024, 8, 20), date(2024, 9, 30), Task.NOT_STARTED, 'Mariana Costa', 'medium'),
]


class Command(BaseCommand):
    help = 'Fills an empty database with demo projects, team members, tasks and expenses.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            help='Also create the "admin" and "manager" demo users with this password.'
        )

    def handle(self, *args, **options):
        if Project.objects.exists():
            self.stdout.write(self.style.NOTICE('Database already has projects. No seeding required.'))
            return

        self.stdout.write("Seeding demo data...")

        with transaction.atomic():
            projects = [Project.objects.create(**data) for data in PROJECTS]

            for name, role, phone, email, salary, indexes, status in EMPLOYEES:
                employee = Employee.objects.create(
                    name=name, role=role, phone=phone, email=email, salary=Decimal(salary), status=status
                )
                employee.projects.set([projects[i] for i in indexes])

            for index, name, start, end, status, responsible, priority in TASKS:
                Task.objects.create(
                    project=projects[index], name=name, start_date=start, end_date=end,
                    status=status, responsible=responsible, priority=priority
                )

            for data in EXPENSES:
                data = dict(data, project=projects[data['project']])
                # Through the service so material expenses also stock the inventory
                ExpenseService.create_expense(Expense(**data))

        if options['password']:
            self._create_user('admin', 'Admin', User.ADMINISTRATOR, options['password'])
            self._create_user('manager', 'Manager', User.SITE_MANAGER, options['password'])

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(PROJECTS)} projects, {len(EMPLOYEES)} employees, "
            f"{len(TASKS)} tasks and {len(EXPENSES)} expenses."
        ))

    def _create_user(self, username, first_name, role, password):
        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f'User "{username}" already exists, skipped.'))
            return
        User.objects.create_user(
            username=username, password=password, first_name=first_name, role=role,
            email=f'{username}@buildwise.com', is_staff=(role == User.ADMINISTRATOR),
        )
        self.stdout.write(self.style.SUCCESS(f'Created user "{username}" ({role}).'))
