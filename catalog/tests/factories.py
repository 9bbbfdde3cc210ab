import factory
from catalog.models import Product
from factory import Faker
from factory.django import DjangoModelFactory


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = Faker("sentence", nb_words=3)
    sku = factory.Sequence(lambda n: f"SKU-{n:05d}")
    price_cents = Faker("pyint", min_value=100, max_value=50_000)
    stock_cached = 0
    is_active = True
    is_archived = False
