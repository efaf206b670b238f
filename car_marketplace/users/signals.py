import logging

from django.db.models.signals import post_save
from django.dispatch import receiver
from rolepermissions.checkers import has_role
from rolepermissions.roles import assign_role

from car_marketplace.users.models import User

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def assign_default_role(sender, instance, created, **kwargs):
    if not created:
        return
    if instance.is_superuser:
        assign_role(instance, 'admin')
        logger.info(f"Assigned role admin to superuser {instance.email}")
    elif not has_role(instance, ['admin', 'buyer']):
        assign_role(instance, 'buyer')
        logger.info(f"Assigned role buyer to user {instance.email}")
