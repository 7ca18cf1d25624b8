"""Seed initial catalog data for development sanity-check.

Creates a few categories and products with variants.
Re-running is idempotent; existing items are reused by slug/sku.
"""

from decimal import Decimal

from catalog.models import Category, Product, ProductVariant
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify


class Command(BaseCommand):
    help = "Seed initial catalog data (categories, products, variants)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        categories = [
            ("Audio", "Audio equipment and accessories"),
            ("Video", "Video gear and accessories"),
            ("Apparel", "Shirts, hoodies and caps"),
        ]

        cat_objs = {}
        for name, desc in categories:
            slug = slugify(name)
            cat, _ = Category.objects.get_or_create(
                slug=slug, defaults={"name": name, "description": desc, "is_active": True}
            )
            cat_objs[name] = cat

        products = [
            {
                "name": "Studio Monitor Speakers",
                "sku": "AUD-MON-001",
                "description": "High-fidelity nearfield monitors for accurate mixing.",
                "price": Decimal("299.99"),
                "original_price": Decimal("349.99"),
                "stock": 25,
                "category": "Audio",
                "featured": True,
                "images": ["https://images.example.com/monitor-speakers-primary.jpg"],
                "variants": [],
            },
            {
                "name": "4K Camcorder",
                "sku": "VID-CAM-001",
                "description": "Compact camcorder with 4K recording and optical stabilization.",
                "price": Decimal("799.00"),
                "original_price": None,
                "stock": 8,
                "category": "Video",
                "featured": False,
                "images": ["https://images.example.com/camcorder-primary.jpg"],
                "variants": [],
            },
            {
                "name": "Logo Hoodie",
                "sku": "APP-HOOD-001",
                "description": "Heavyweight cotton hoodie.",
                "price": Decimal("49.00"),
                "original_price": None,
                "stock": 40,
                "category": "Apparel",
                "featured": True,
                "images": ["https://images.example.com/hoodie-primary.jpg"],
                "variants": [
                    ("APP-HOOD-001-M", "Medium", None),
                    ("APP-HOOD-001-XXL", "XXL", Decimal("54.00")),
                ],
            },
        ]

        for p in products:
            prod, _ = Product.objects.get_or_create(
                sku=p["sku"],
                defaults={
                    "name": p["name"],
                    "slug": slugify(p["name"]),
                    "description": p["description"],
                    "price": p["price"],
                    "original_price": p["original_price"],
                    "stock": p["stock"],
                    "category": cat_objs[p["category"]],
                    "is_featured": p["featured"],
                    "images": p["images"],
                },
            )
            for sku, name, price in p["variants"]:
                ProductVariant.objects.get_or_create(sku=sku, defaults={"product": prod, "name": name, "price": price})

        self.stdout.write(self.style.SUCCESS("Catalog seed complete."))
