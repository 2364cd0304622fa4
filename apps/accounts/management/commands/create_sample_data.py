"""
Management command to create a demo tenant for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 1 business (demo-electronics) with a business admin
- 1 shop (demo-accra) with a shop admin and 2 debt collectors
- 5 products
- 6 customers split between the collectors
- Purchases with down payments and a few pending collector payments

Everything goes through the regular services, so audit entries are
written exactly as in production.
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.businesses.models import Business, BusinessMember
from apps.businesses.services import create_shop, create_debt_collector
from apps.customers.services import create_customer
from apps.products.services import create_product
from apps.purchases.models import PaymentMethod
from apps.purchases.services import create_purchase, record_collector_payment

BUSINESS_SLUG = 'demo-electronics'
SHOP_SLUG = 'demo-accra'
PASSWORD = 'demo-pass-123'

PRODUCTS = [
    ('Samsung 43" Smart TV', Decimal('3200.00'), 'TV-SAM-43'),
    ('LG Double Door Fridge', Decimal('5400.00'), 'FR-LG-DD'),
    ('Tecno Spark Phone', Decimal('1450.00'), 'PH-TEC-SP'),
    ('Binatone Blender', Decimal('380.00'), 'BL-BIN-01'),
    ('Nasco Gas Cooker', Decimal('2100.00'), 'CK-NAS-4B'),
]

CUSTOMERS = [
    ('Ama', 'Mensah', '0244000001'),
    ('Kofi', 'Boateng', '0244000002'),
    ('Akosua', 'Owusu', '0244000003'),
    ('Yaw', 'Asante', '0244000004'),
    ('Efua', 'Addo', '0244000005'),
    ('Kwame', 'Darko', '0244000006'),
]


class Command(BaseCommand):
    help = 'Create a demo business with a shop, staff, customers and purchases'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete the demo business and its users before creating it again',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing demo data...')
            self.clear_data()

        if Business.objects.filter(slug=BUSINESS_SLUG).exists():
            self.stdout.write(self.style.WARNING('Demo business already exists. Use --clear to recreate it.'))
            return

        self.stdout.write('Creating sample data...')

        owner = self.create_business_admin()
        business = Business.objects.create(name='Demo Electronics', slug=BUSINESS_SLUG)
        BusinessMember.objects.create(user=owner, business=business)

        shop = create_shop(
            business=business,
            actor=owner,
            name='Demo Electronics Accra',
            shop_slug=SHOP_SLUG,
            admin_name='Shop Admin',
            admin_email='shop@demo.example.com',
            admin_password=PASSWORD,
        )
        shop_admin = User.objects.get(email='shop@demo.example.com')

        collectors = [
            create_debt_collector(
                shop=shop,
                actor=shop_admin,
                name=name,
                email=email,
                password=PASSWORD,
            )
            for name, email in [
                ('Kojo Collector', 'kojo@demo.example.com'),
                ('Esi Collector', 'esi@demo.example.com'),
            ]
        ]

        products = [
            create_product(shop=shop, actor=shop_admin, name=name, price=price, sku=sku)
            for name, price, sku in PRODUCTS
        ]

        self.stdout.write('  Creating customers and purchases...')
        for index, (first_name, last_name, phone) in enumerate(CUSTOMERS):
            collector = collectors[index % len(collectors)]
            customer = create_customer(
                shop=shop,
                actor=shop_admin,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                city='Accra',
                assigned_collector_id=collector.id,
            )
            product = products[index % len(products)]
            purchase = create_purchase(
                shop=shop,
                actor=shop_admin,
                customer_id=customer.id,
                items=[{'product_id': product.id, 'quantity': 1}],
                installments=8,
                down_payment=(product.price / 10).quantize(Decimal('0.01')),
            )
            if index % 2 == 0:
                record_collector_payment(
                    shop=shop,
                    membership=collector,
                    actor=collector.user,
                    purchase_id=purchase.id,
                    amount=Decimal('100.00'),
                    payment_method=PaymentMethod.MOBILE_MONEY,
                    reference=f'MOMO-{index + 1:04d}',
                )

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write(f'Test accounts (password: {PASSWORD}):')
        self.stdout.write('  owner@demo.example.com (business admin)')
        self.stdout.write('  shop@demo.example.com (shop admin)')
        self.stdout.write('  kojo@demo.example.com, esi@demo.example.com (debt collectors)')

    def clear_data(self):
        """Delete the demo business (cascading to shops) and its users."""
        Business.objects.filter(slug=BUSINESS_SLUG).delete()
        User.objects.filter(email__endswith='@demo.example.com').delete()

    def create_business_admin(self):
        self.stdout.write('  Creating business admin...')
        owner, _ = User.objects.get_or_create(
            email='owner@demo.example.com',
            defaults={
                'full_name': 'Demo Owner',
                'role': UserRole.BUSINESS_ADMIN,
            }
        )
        owner.set_password(PASSWORD)
        owner.save()
        return owner
