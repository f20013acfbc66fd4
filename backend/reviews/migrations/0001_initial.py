# Generated migration for initial reviews app setup

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('groups', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('place_id', models.CharField(help_text='External place identifier', max_length=255)),
                ('place_name', models.CharField(blank=True, default='', max_length=255)),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('comment', models.TextField(blank=True, default='')),
                ('is_public', models.BooleanField(default=True)),
                ('location', models.JSONField(blank=True, help_text='{lat, lng, formatted_address[, city][, country]}', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to=settings.AUTH_USER_MODEL)),
                ('group', models.ForeignKey(blank=True, help_text='Also visible to the members of this group', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviews', to='groups.group')),
            ],
            options={
                'db_table': 'reviews_review',
                'ordering': ['-created_at', 'id'],
                'indexes': [
                    models.Index(fields=['place_id'], name='review_place_idx'),
                    models.Index(fields=['-created_at'], name='review_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ReviewLike',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('review', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='likes', to='reviews.review')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='review_likes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'reviews_review_like',
                'unique_together': {('review', 'user')},
            },
        ),
    ]
