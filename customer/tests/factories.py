import factory
from customer.models import Address
from factory.django import DjangoModelFactory


class AddressFactory(DjangoModelFactory):
    class Meta:
        model = Address

    user = factory.SubFactory("users.tests.factories.UserFactory")
    full_name = factory.Faker("name")
    line1 = factory.Faker("street_address")
    city = factory.Faker("city")
    state = "IL"
    postal_code = "62701"
    country_code = "US"
    phone = "+14155552671"
    is_default = False
