from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="cart_fingerprint",
            field=models.CharField(
                blank=True,
                default="",
                help_text="Digest of the cart lines the amount was computed from",
                max_length=64,
            ),
        ),
    ]
