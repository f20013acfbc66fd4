# Generated migration for initial trips app setup

import django.db.models.deletion
import django.db.models.expressions
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Trip',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='User defined name for the trip', max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('is_public', models.BooleanField(default=False, help_text='Public trips appear on profiles and can be shared by link')),
                ('location_name', models.CharField(blank=True, default='', max_length=255)),
                ('location_lat', models.FloatField(blank=True, null=True)),
                ('location_lng', models.FloatField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(help_text='Reference to the owner of the trip', on_delete=django.db.models.deletion.CASCADE, related_name='trips', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', 'id'],
                'indexes': [
                    models.Index(fields=['owner', '-created_at'], name='trip_owner_created_idx'),
                    models.Index(fields=['is_public'], name='trip_public_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TripPlace',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('place_id', models.CharField(help_text='External place identifier', max_length=255)),
                ('place_name', models.CharField(max_length=255)),
                ('place_address', models.CharField(blank=True, default='', max_length=512)),
                ('notes', models.TextField(blank=True, default='', max_length=1000)),
                ('visit_date', models.DateField(blank=True, null=True)),
                ('order', models.IntegerField(blank=True, help_text='Position in the trip (0, 1, 2...)', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('trip', models.ForeignKey(help_text='Reference to the parent trip', on_delete=django.db.models.deletion.CASCADE, related_name='places', to='trips.trip')),
            ],
            options={
                'ordering': [django.db.models.expressions.OrderBy(django.db.models.expressions.F('order'), nulls_last=True), 'id'],
                'indexes': [models.Index(fields=['trip', 'order'], name='trip_place_order_idx')],
            },
        ),
    ]
