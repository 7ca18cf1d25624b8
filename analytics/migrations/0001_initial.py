from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Visitor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ip_address", models.GenericIPAddressField(unique=True)),
                ("user_agent", models.CharField(blank=True, max_length=512)),
                ("visit_count", models.PositiveIntegerField(default=1)),
                ("first_visit", models.DateTimeField(auto_now_add=True)),
                ("last_visit", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-last_visit"]},
        ),
    ]
