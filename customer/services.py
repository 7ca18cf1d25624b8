"""Customer domain services for mutations and side-effects.

Keep business rules here and keep views thin.
"""

from django.db import transaction

from .models import Address


@transaction.atomic
def save_address(*, user, instance: Address | None = None, **fields) -> Address:
    """Create or update one of the user's addresses.

    Marking an address as default clears the flag on the user's others
    before saving, so the partial unique constraint never trips.
    """

    if fields.get("is_default"):
        others = Address.objects.select_for_update().filter(user=user, is_default=True)
        if instance is not None:
            others = others.exclude(pk=instance.pk)
        others.update(is_default=False)

    if instance is None:
        return Address.objects.create(user=user, **fields)
    for name, value in fields.items():
        setattr(instance, name, value)
    instance.save()
    return instance
