from decimal import Decimal

from django.core.management.base import BaseCommand

from products.models import Product


class Command(BaseCommand):
    help = "Seed a demo catalog (idempotent; existing SKUs keep their stock)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--stock",
            type=int,
            default=25,
            help="Initial stock for newly created products",
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        products_data = [
            ("SAR-SLK-01", "Silk Saree - Maroon", "Handwoven pure silk saree", "4999.00"),
            ("SAR-CTN-02", "Cotton Saree - Indigo", "Soft cotton everyday saree", "1299.00"),
            ("DHT-WHT-01", "Cotton Dhoti - White", "Traditional 4m dhoti", "549.00"),
            ("SHL-WOL-01", "Wool Shawl - Grey", "Warm woollen shawl", "899.00"),
            ("TWL-CTN-01", "Bath Towel - Cotton", "Absorbent cotton towel", "250.00"),
        ]

        created_count = 0
        for sku, name, description, price in products_data:
            _, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "description": description,
                    "price": Decimal(price),
                    "stock_quantity": options["stock"],
                },
            )
            created_count += int(created)

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} new, {len(products_data)} total).")
        )
