from decimal import Decimal

import factory
from catalog.models import Category, Product, ProductVariant
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category
        django_get_or_create = ("slug",)

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("sentence")
    is_active = True


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Product {n}")
    slug = factory.LazyAttribute(lambda o: "-".join(o.name.lower().split()))
    sku = factory.Sequence(lambda n: f"SKU-{n:05d}")
    description = Faker("paragraph")
    category = factory.SubFactory(CategoryFactory)
    price = Decimal("10.00")
    stock = 10
    images = factory.LazyFunction(lambda: ["https://images.example.com/product.jpg"])
    is_active = True


class ProductVariantFactory(DjangoModelFactory):
    class Meta:
        model = ProductVariant

    product = factory.SubFactory(ProductFactory)
    sku = factory.Sequence(lambda n: f"VAR-{n:05d}")
    name = Faker("color_name")
    price = None
    is_active = True
