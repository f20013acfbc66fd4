"""
Membership predicates shared by every group-gated endpoint.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import CharField, Count, Exists, OuterRef, Subquery

from .models import Group, GroupMembership

logger = logging.getLogger(__name__)


def is_member(group_id, user_id) -> bool:
    if user_id is None:
        return False
    return GroupMembership.objects.filter(group_id=group_id, user_id=user_id).exists()


def is_admin(group_id, user_id) -> bool:
    if user_id is None:
        return False
    return GroupMembership.objects.filter(
        group_id=group_id, user_id=user_id, role=GroupMembership.Role.ADMIN
    ).exists()


class GroupService:
    """
    Group lifecycle and the annotated listing used by the API.
    """

    @staticmethod
    def annotated_groups(user):
        """
        All groups with member count and the viewer's membership in one query.
        """
        membership = GroupMembership.objects.filter(group=OuterRef('pk'), user_id=user.pk)
        return (
            Group.objects.select_related('created_by')
            .annotate(
                member_count=Count('memberships', distinct=True),
                is_joined=Exists(membership),
                user_role=Subquery(membership.values('role')[:1], output_field=CharField()),
            )
            .order_by('-created_at', 'id')
        )

    @staticmethod
    def create_group(user, **fields) -> Group:
        with transaction.atomic():
            group = Group.objects.create(created_by=user, **fields)
            GroupMembership.objects.create(group=group, user=user, role=GroupMembership.Role.ADMIN)
        logger.info("User %s created group %s", user.pk, group.pk)
        return group

    @staticmethod
    def join(group: Group, user) -> bool:
        """Returns False when the user already belongs to the group."""
        try:
            with transaction.atomic():
                _, created = GroupMembership.objects.get_or_create(
                    group=group, user=user, defaults={'role': GroupMembership.Role.MEMBER}
                )
        except IntegrityError:
            return False
        if created:
            logger.info("User %s joined group %s", user.pk, group.pk)
        return created

    @staticmethod
    def leave(group: Group, user) -> None:
        deleted, _ = GroupMembership.objects.filter(group=group, user=user).delete()
        if deleted:
            logger.info("User %s left group %s", user.pk, group.pk)
