import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    firebase_uid = factory.Sequence(lambda n: f"uid-{n:06d}")
    username = factory.LazyAttribute(lambda o: f"fb_{o.firebase_uid}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role = "customer"
    is_active = True
    password = factory.PostGenerationMethodCall("set_unusable_password")


class AdminFactory(UserFactory):
    role = "admin"
