from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("PROJECTS", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="site",
            name="land_area_sqft",
            field=models.DecimalField(decimal_places=10, default=0, max_digits=28),
        ),
    ]
