from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductRecord",
            fields=[
                ("product_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField()),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("stock", models.IntegerField()),
                ("payload", models.JSONField()),
            ],
            options={
                "db_table": "pdv_products",
                "ordering": ["position"],
            },
        ),
        migrations.CreateModel(
            name="SaleRecord",
            fields=[
                ("sale_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(db_index=True)),
                ("status", models.CharField(max_length=16)),
                ("total", models.FloatField()),
                ("payload", models.JSONField()),
            ],
            options={
                "db_table": "pdv_sales",
                "ordering": ["position"],
            },
        ),
        migrations.CreateModel(
            name="CashRegisterRecord",
            fields=[
                ("session_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField()),
                ("opened_at", models.DateTimeField(db_index=True)),
                ("status", models.CharField(max_length=16)),
                ("payload", models.JSONField()),
            ],
            options={
                "db_table": "pdv_cash_registers",
                "ordering": ["position"],
            },
        ),
        migrations.CreateModel(
            name="SettingsRecord",
            fields=[
                ("key", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("value", models.JSONField()),
            ],
            options={
                "db_table": "pdv_settings",
                "ordering": ["key"],
            },
        ),
    ]
