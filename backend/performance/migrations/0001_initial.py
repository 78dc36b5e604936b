import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='EmployeeBadge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('badge_type', models.CharField(max_length=64)),
                ('badge_tier', models.CharField(choices=[('gold', 'Gold'), ('silver', 'Silver'), ('bronze', 'Bronze')], max_length=8)),
                ('metric_type', models.CharField(choices=[('revenue', 'Revenue'), ('invoices', 'Invoices'), ('estimates', 'Estimates'), ('shipments', 'Shipments')], max_length=16)),
                ('time_period', models.DateField()),
                ('rank_achieved', models.PositiveSmallIntegerField()),
                ('value_achieved', models.DecimalField(decimal_places=2, max_digits=18)),
                ('achieved_at', models.DateTimeField(auto_now_add=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='badges', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'employee_badges',
                'ordering': ('-achieved_at',),
            },
        ),
        migrations.AddConstraint(
            model_name='employeebadge',
            constraint=models.UniqueConstraint(fields=('employee', 'badge_type', 'time_period'), name='employee_badges_once_per_period'),
        ),
        migrations.CreateModel(
            name='EmployeeMilestone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('milestone_type', models.CharField(max_length=16)),
                ('milestone_value', models.BigIntegerField()),
                ('achieved_at', models.DateTimeField(auto_now_add=True)),
                ('notified_at', models.DateTimeField(blank=True, null=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='milestones', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'employee_milestones',
                'ordering': ('-achieved_at',),
            },
        ),
        migrations.AddConstraint(
            model_name='employeemilestone',
            constraint=models.UniqueConstraint(fields=('employee', 'milestone_type', 'milestone_value'), name='employee_milestones_once'),
        ),
    ]
