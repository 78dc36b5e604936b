import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RegionPricing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('service_type', models.CharField(default='air', max_length=32)),
                ('customer_rate_per_kg', models.DecimalField(decimal_places=4, max_digits=12)),
                ('agent_rate_per_kg', models.DecimalField(decimal_places=4, max_digits=12)),
                ('handling_fee', models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('is_active', models.BooleanField(default=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('region', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='pricing', to='core.region')),
            ],
            options={'db_table': 'region_pricing'},
        ),
        migrations.CreateModel(
            name='ContainerPricing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('container_size', models.CharField(choices=[('20ft', '20ft'), ('40ft', '40ft')], max_length=8)),
                ('price', models.DecimalField(decimal_places=2, max_digits=18)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('is_active', models.BooleanField(default=True)),
                ('region', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='container_pricing', to='core.region')),
            ],
            options={'db_table': 'container_pricing', 'unique_together': {('region', 'container_size')}},
        ),
        migrations.CreateModel(
            name='VehiclePricing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vehicle_type', models.CharField(choices=[('motorcycle', 'Motorcycle'), ('sedan', 'Sedan'), ('suv', 'SUV'), ('truck', 'Truck')], max_length=16)),
                ('shipping_method', models.CharField(choices=[('roro', 'RoRo'), ('container', 'Container')], max_length=16)),
                ('price', models.DecimalField(decimal_places=2, max_digits=18)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('is_active', models.BooleanField(default=True)),
                ('region', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vehicle_pricing', to='core.region')),
            ],
            options={'db_table': 'vehicle_pricing', 'unique_together': {('region', 'vehicle_type', 'shipping_method')}},
        ),
        migrations.CreateModel(
            name='VehicleDutyRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rate_key', models.CharField(max_length=64, unique=True)),
                ('rate_name', models.CharField(max_length=128)),
                ('rate_type', models.CharField(choices=[('percentage', 'Percentage'), ('fixed', 'Fixed')], default='percentage', max_length=16)),
                ('rate_value', models.DecimalField(decimal_places=4, max_digits=18)),
                ('applies_to', models.CharField(default='all', max_length=32)),
                ('engine_cc_min', models.PositiveIntegerField(blank=True, null=True)),
                ('engine_cc_max', models.PositiveIntegerField(blank=True, null=True)),
                ('vehicle_age_min', models.PositiveIntegerField(blank=True, null=True)),
                ('vehicle_category', models.CharField(blank=True, help_text='utility / non_utility, only for old-vehicle rows', max_length=32, null=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('description', models.TextField(blank=True, default='')),
            ],
            options={'db_table': 'vehicle_duty_rates', 'ordering': ('display_order', 'rate_key')},
        ),
    ]
