# Generated migration for initial locations app setup

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
            name='PlaceLike',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('place_id', models.CharField(help_text='External place identifier', max_length=255)),
                ('place_name', models.CharField(max_length=255)),
                ('place_address', models.CharField(blank=True, default='', max_length=512)),
                ('place_type', models.CharField(blank=True, default='', help_text='Provider category, e.g. restaurant or museum', max_length=100)),
                ('rating', models.FloatField(blank=True, null=True)),
                ('price_level', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='place_likes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'locations_place_like',
                'ordering': ['-created_at', 'id'],
                'indexes': [models.Index(fields=['place_type'], name='place_like_type_idx')],
                'unique_together': {('user', 'place_id')},
            },
        ),
    ]
