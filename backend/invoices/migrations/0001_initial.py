import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('customers', '0001_initial'),
        ('shipments', '0001_initial'),
        ('estimates', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('invoice_number', models.CharField(max_length=32, unique=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=18)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('amount_in_home', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ('exchange_rate', models.DecimalField(blank=True, decimal_places=8, max_digits=20, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('partially_paid', 'Partially Paid'), ('paid', 'Paid'), ('unpaid', 'Unpaid'), ('overdue', 'Overdue'), ('cancelled', 'Cancelled')], default='pending', max_length=16)),
                ('amount_paid', models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('issue_date', models.DateField(default=django.utils.timezone.localdate)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('invoice_type', models.CharField(choices=[('shipping', 'Shipping'), ('purchase_shipping', 'Purchase & Shipping'), ('other', 'Other')], default='shipping', max_length=32)),
                ('invoice_direction', models.CharField(blank=True, choices=[('from_agent', 'From Agent'), ('to_agent', 'To Agent')], max_length=16, null=True)),
                ('rate_per_kg', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('product_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ('purchase_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('agent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='agent_invoices', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_invoices', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='invoices', to='customers.customer')),
                ('estimate', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='invoice', to='estimates.estimate')),
                ('shipment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='shipments.shipment')),
            ],
            options={'db_table': 'invoices', 'ordering': ('-created_at',)},
        ),
        migrations.AddIndex(
            model_name='invoice',
            index=models.Index(fields=['status', 'due_date'], name='invoices_status_due_idx'),
        ),
        migrations.CreateModel(
            name='InvoiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_type', models.CharField(choices=[('freight', 'Freight'), ('customs', 'Customs'), ('handling', 'Handling'), ('insurance', 'Insurance'), ('duty', 'Duty'), ('transit', 'Transit'), ('other', 'Other')], default='other', max_length=16)),
                ('description', models.CharField(blank=True, default='', max_length=255)),
                ('quantity', models.DecimalField(decimal_places=4, default=1, max_digits=12)),
                ('unit_price', models.DecimalField(decimal_places=4, max_digits=18)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=18)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('unit_type', models.CharField(choices=[('fixed', 'Fixed'), ('percent', 'Percent'), ('kg', 'Per kg')], default='fixed', max_length=8)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='invoices.invoice')),
            ],
            options={'db_table': 'invoice_items', 'ordering': ('id',)},
        ),
    ]
