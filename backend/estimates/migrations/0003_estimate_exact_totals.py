from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('estimates', '0002_estimate_converted_to_invoice'),
    ]

    operations = [
        migrations.AlterField(
            model_name='estimate',
            name='subtotal',
            field=models.DecimalField(decimal_places=6, max_digits=24),
        ),
        migrations.AlterField(
            model_name='estimate',
            name='total',
            field=models.DecimalField(decimal_places=6, max_digits=24),
        ),
    ]
