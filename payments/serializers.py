from common.choices import PaymentMethod
from django.conf import settings
from rest_framework import serializers


class PaymentIntentRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    currency = serializers.RegexField(r"^[A-Za-z]{3}$", required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)

    def validate_currency(self, value: str) -> str:
        return value.lower()

    def validate(self, attrs):
        attrs.setdefault("currency", getattr(settings, "PAYMENT_CURRENCY", "usd"))
        return attrs


class PaymentIntentSerializer(serializers.Serializer):
    token = serializers.CharField()
    provider_reference = serializers.CharField()


class PaymentWebhookSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    event = serializers.CharField(max_length=64)
    transaction_id = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    provider = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
