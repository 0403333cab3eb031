import uuid

import django.core.validators
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
            name='Product',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='active')),
                ('sku', models.CharField(help_text='Globally unique, immutable after creation (archived rows included)', max_length=64, unique=True, verbose_name='SKU')),
                ('name', models.CharField(db_index=True, max_length=255, verbose_name='name')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('category', models.CharField(blank=True, db_index=True, max_length=120, verbose_name='category')),
                ('brand', models.CharField(blank=True, db_index=True, max_length=120, verbose_name='brand')),
                ('unit', models.CharField(default='pcs', max_length=20, verbose_name='unit')),
                ('unit_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)], verbose_name='unit price')),
                ('quantity', models.IntegerField(default=0, editable=False, help_text='Materialised stock level; mutated only by the movement ledger', verbose_name='quantity')),
                ('ledger_version', models.PositiveIntegerField(default=0, editable=False, help_text='Number of movements applied; optimistic concurrency token', verbose_name='ledger version')),
                ('barcode', models.CharField(blank=True, help_text='Physically printed code; distinct from the generated symbol', max_length=128, null=True, unique=True, verbose_name='barcode')),
                ('is_manual_entry', models.BooleanField(default=False, verbose_name='manual entry')),
                ('symbol_image', models.ImageField(blank=True, help_text='Generated scannable symbol; manual entries only', null=True, upload_to='inventory_symbols/%Y/%m/', verbose_name='symbol image')),
                ('images', models.JSONField(blank=True, default=list, help_text='Storage references of product photos', verbose_name='images')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='updated by')),
            ],
            options={
                'verbose_name': 'product',
                'verbose_name_plural': 'products',
                'db_table': 'inventory_products',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['is_active', 'name'], name='inv_product_active_name_idx'),
                    models.Index(fields=['is_active', 'category'], name='inv_product_active_cat_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='inventory_product_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InventoryMovement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('movement_type', models.CharField(choices=[('in', 'Stock in'), ('out', 'Stock out'), ('adjustment', 'Adjustment')], db_index=True, max_length=12, verbose_name='movement type')),
                ('quantity', models.IntegerField(verbose_name='quantity')),
                ('previous_quantity', models.PositiveIntegerField(verbose_name='previous quantity')),
                ('new_quantity', models.PositiveIntegerField(verbose_name='new quantity')),
                ('sequence', models.PositiveIntegerField(verbose_name='sequence')),
                ('reason', models.CharField(blank=True, max_length=255, verbose_name='reason')),
                ('reference_number', models.CharField(blank=True, max_length=100, verbose_name='reference number')),
                ('vendor_id', models.CharField(blank=True, max_length=64, verbose_name='vendor reference')),
                ('customer_id', models.CharField(blank=True, max_length=64, verbose_name='customer reference')),
                ('sender_name', models.CharField(blank=True, max_length=200, verbose_name='sender name')),
                ('sender_phone', models.CharField(blank=True, max_length=40, verbose_name='sender phone')),
                ('sender_company', models.CharField(blank=True, max_length=200, verbose_name='sender company')),
                ('sender_address', models.CharField(blank=True, max_length=500, verbose_name='sender address')),
                ('receiver_name', models.CharField(blank=True, max_length=200, verbose_name='receiver name')),
                ('receiver_phone', models.CharField(blank=True, max_length=40, verbose_name='receiver phone')),
                ('receiver_company', models.CharField(blank=True, max_length=200, verbose_name='receiver company')),
                ('receiver_address', models.CharField(blank=True, max_length=500, verbose_name='receiver address')),
                ('delivery_person_name', models.CharField(blank=True, max_length=200, verbose_name='delivery person name')),
                ('delivery_person_phone', models.CharField(blank=True, max_length=40, verbose_name='delivery person phone')),
                ('images', models.JSONField(blank=True, default=list, help_text='Storage references of evidence photos', verbose_name='images')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='inventory.product', verbose_name='product')),
            ],
            options={
                'verbose_name': 'inventory movement',
                'verbose_name_plural': 'inventory movements',
                'db_table': 'inventory_movements',
                'ordering': ['-created_at', '-sequence'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='inv_movement_product_idx'),
                    models.Index(fields=['movement_type', 'created_at'], name='inv_movement_type_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'sequence'), name='inventory_movement_unique_sequence'),
                    models.CheckConstraint(condition=models.Q(('quantity', 0), _negated=True), name='inventory_movement_non_zero_quantity'),
                ],
            },
        ),
    ]
