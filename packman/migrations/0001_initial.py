"""
Initial migration for Packman models.
"""

from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


PACK_STATUS_CHOICES = [
    ('received', 'Received'),
    ('active', 'Active'),
    ('depleted', 'Depleted'),
    ('returned', 'Returned'),
]
DEPLETION_REASON_CHOICES = [
    ('shift_close', 'Closed at last serial'),
    ('manual_sold_out', 'Marked sold out'),
    ('auto_replaced', 'Replaced by a new pack'),
]
ENTRY_METHOD_CHOICES = [('scan', 'Scan'), ('manual', 'Manual')]


def serial_validator():
    return django.core.validators.RegexValidator('^\\d{3}$', 'Serial must be 3 digits.')


class Migration(migrations.Migration):
    """Create Packman models: Store, Game, Bin, Pack, shifts, variances, tickets."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.SlugField(unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Store',
                'verbose_name_plural': 'Stores',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Game',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('game_code', models.CharField(max_length=4, unique=True, validators=[django.core.validators.RegexValidator('^\\d{4}$', 'Game code must be 4 digits.')], verbose_name='Game code')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Ticket price')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], db_index=True, default='active', max_length=20, verbose_name='Status')),
                ('tickets_per_pack', models.PositiveIntegerField(blank=True, help_text='Empty = PACKMAN["TICKETS_PER_PACK"].', null=True, verbose_name='Tickets per pack')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Game',
                'verbose_name_plural': 'Games',
                'ordering': ['game_code'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('price__gt', 0)), name='game_price_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Shift',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('opened_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Opened at')),
                ('closed_at', models.DateTimeField(blank=True, null=True, verbose_name='Closed at')),
                ('status', models.CharField(choices=[('open', 'Open'), ('closing', 'Closing'), ('closed', 'Closed')], db_index=True, default='open', max_length=20, verbose_name='Status')),
                ('opened_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Opened by')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shifts', to='packman.store', verbose_name='Store')),
            ],
            options={
                'verbose_name': 'Shift',
                'verbose_name_plural': 'Shifts',
                'ordering': ['-opened_at'],
                'indexes': [
                    models.Index(fields=['store', 'opened_at'], name='packman_shift_store_open_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Bin',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('location', models.CharField(blank=True, default='', max_length=255, verbose_name='Location')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Display order')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bins', to='packman.store', verbose_name='Store')),
            ],
            options={
                'verbose_name': 'Bin',
                'verbose_name_plural': 'Bins',
                'ordering': ['store', 'display_order'],
                'indexes': [
                    models.Index(fields=['store', 'display_order'], name='packman_bin_store_order_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Pack',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('pack_number', models.CharField(max_length=7, validators=[django.core.validators.RegexValidator('^\\d{7}$', 'Pack number must be 7 digits.')], verbose_name='Pack number')),
                ('serial_start', models.CharField(max_length=3, validators=[serial_validator()], verbose_name='First serial')),
                ('serial_end', models.CharField(max_length=3, validators=[serial_validator()], verbose_name='Last serial')),
                ('status', models.CharField(choices=PACK_STATUS_CHOICES, db_index=True, default='received', max_length=20, verbose_name='Status')),
                ('received_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Received at')),
                ('activated_at', models.DateTimeField(blank=True, null=True, verbose_name='Activated at')),
                ('depleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Depleted at')),
                ('depletion_reason', models.CharField(blank=True, choices=DEPLETION_REASON_CHOICES, default='', max_length=20, verbose_name='Depletion reason')),
                ('returned_at', models.DateTimeField(blank=True, null=True, verbose_name='Returned at')),
                ('return_reason', models.TextField(blank=True, default='', verbose_name='Return reason')),
                ('last_sold_serial', models.CharField(blank=True, default='', max_length=3, validators=[serial_validator()], verbose_name='Last sold serial')),
                ('tickets_sold_on_return', models.PositiveIntegerField(blank=True, null=True, verbose_name='Tickets sold on return')),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='packs', to='packman.store', verbose_name='Store')),
                ('game', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='packs', to='packman.game', verbose_name='Game')),
                ('current_bin', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='packs', to='packman.bin', verbose_name='Current bin')),
                ('received_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Received by')),
                ('activated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Activated by')),
                ('activated_shift', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='packman.shift', verbose_name='Activated in shift')),
                ('depleted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Depleted by')),
                ('depleted_shift', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='packman.shift', verbose_name='Depleted in shift')),
                ('returned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Returned by')),
                ('returned_shift', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='packman.shift', verbose_name='Returned in shift')),
            ],
            options={
                'verbose_name': 'Pack',
                'verbose_name_plural': 'Packs',
                'ordering': ['store', 'pack_number'],
                'constraints': [
                    models.UniqueConstraint(fields=('store', 'pack_number'), name='unique_pack_number_per_store'),
                    models.CheckConstraint(condition=models.Q(('serial_start__lte', models.F('serial_end'))), name='pack_serial_range_ordered'),
                    models.CheckConstraint(condition=models.Q(('activated_at__isnull', True), ('activated_at__gte', models.F('received_at')), _connector='OR'), name='pack_activated_after_received'),
                    models.CheckConstraint(condition=models.Q(('depleted_at__isnull', True), ('depleted_at__gte', models.F('activated_at')), _connector='OR'), name='pack_depleted_after_activated'),
                    models.CheckConstraint(condition=models.Q(('returned_at__isnull', True), ('returned_at__gte', models.F('received_at')), _connector='OR'), name='pack_returned_after_received'),
                ],
                'indexes': [
                    models.Index(fields=['store', 'status'], name='packman_pack_store_status_idx'),
                    models.Index(fields=['current_bin', 'status'], name='packman_pack_bin_status_idx'),
                    models.Index(fields=['depleted_shift'], name='packman_pack_depl_shift_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PackBinHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('moved_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, verbose_name='Moved at')),
                ('reason', models.CharField(blank=True, default='', max_length=500, verbose_name='Reason')),
                ('pack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bin_history', to='packman.pack', verbose_name='Pack')),
                ('bin', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pack_history', to='packman.bin', verbose_name='Bin')),
                ('moved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Moved by')),
            ],
            options={
                'verbose_name': 'Pack movement',
                'verbose_name_plural': 'Pack movements',
                'ordering': ['moved_at', 'pk'],
                'indexes': [
                    models.Index(fields=['pack', 'moved_at'], name='packman_hist_pack_moved_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShiftOpening',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('opening_serial', models.CharField(max_length=3, validators=[serial_validator()], verbose_name='Opening serial')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('shift', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='openings', to='packman.shift', verbose_name='Shift')),
                ('pack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shift_openings', to='packman.pack', verbose_name='Pack')),
            ],
            options={
                'verbose_name': 'Shift opening',
                'verbose_name_plural': 'Shift openings',
                'constraints': [
                    models.UniqueConstraint(fields=('shift', 'pack'), name='unique_opening_per_shift_pack'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShiftClosing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('opening_serial', models.CharField(max_length=3, validators=[serial_validator()], verbose_name='Opening serial')),
                ('closing_serial', models.CharField(max_length=3, validators=[serial_validator()], verbose_name='Closing serial')),
                ('tickets_sold', models.PositiveIntegerField(verbose_name='Tickets sold')),
                ('entry_method', models.CharField(choices=ENTRY_METHOD_CHOICES, default='scan', max_length=10, verbose_name='Entry method')),
                ('manual_entry_authorized_at', models.DateTimeField(blank=True, null=True, verbose_name='Manual entry authorized at')),
                ('is_system_generated', models.BooleanField(default=False, help_text='Closed automatically for a pack depleted during the shift.', verbose_name='System generated')),
                ('closed_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Closed at')),
                ('shift', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='closings', to='packman.shift', verbose_name='Shift')),
                ('pack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shift_closings', to='packman.pack', verbose_name='Pack')),
                ('bin', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='packman.bin', verbose_name='Bin')),
                ('manual_entry_authorized_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Manual entry authorized by')),
                ('closed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Closed by')),
            ],
            options={
                'verbose_name': 'Shift closing',
                'verbose_name_plural': 'Shift closings',
                'ordering': ['closed_at', 'pk'],
                'constraints': [
                    models.UniqueConstraint(fields=('shift', 'pack'), name='unique_closing_per_shift_pack'),
                ],
                'indexes': [
                    models.Index(fields=['pack', 'closed_at'], name='packman_closing_pack_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Variance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('expected', models.IntegerField(verbose_name='Expected')),
                ('actual', models.IntegerField(verbose_name='Actual')),
                ('difference', models.IntegerField(verbose_name='Difference')),
                ('reason', models.TextField(blank=True, default='', verbose_name='Reason')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Approved at')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('shift', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variances', to='packman.shift', verbose_name='Shift')),
                ('pack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variances', to='packman.pack', verbose_name='Pack')),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Approved by')),
            ],
            options={
                'verbose_name': 'Variance',
                'verbose_name_plural': 'Variances',
                'ordering': ['created_at', 'pk'],
                'constraints': [
                    models.UniqueConstraint(fields=('shift', 'pack'), name='unique_variance_per_shift_pack'),
                    models.CheckConstraint(condition=models.Q(('difference', models.F('actual') - models.F('expected'))), name='variance_difference_consistent'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TicketSerial',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('serial_number', models.CharField(max_length=14, unique=True, verbose_name='Serial number')),
                ('sold_at', models.DateTimeField(blank=True, null=True, verbose_name='Sold at')),
                ('pack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tickets', to='packman.pack', verbose_name='Pack')),
                ('shift', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tickets', to='packman.shift', verbose_name='Shift')),
                ('cashier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Cashier')),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'ordering': ['serial_number'],
                'indexes': [
                    models.Index(fields=['pack', 'shift'], name='packman_ticket_pack_shift_idx'),
                ],
            },
        ),
    ]
