import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    """Every account gets exactly one profile."""
    if created:
        UserProfile.objects.get_or_create(user=instance)
        logger.info("Created profile for user %s", instance.pk)
