"""
Projects Celery Tasks

Notification emails for the project lifecycle:
- send_bid_selected_email: tells the winning seller
- send_project_completed_email: tells the buyer and the selected seller

Tasks receive primary keys and reload rows, so a retried task always sees
the committed state.
"""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _send(to_email, subject, template_name, context):
    """Render ``<template_name>.txt`` and ``.html`` and send both bodies."""
    send_mail(
        subject=subject,
        message=render_to_string(f"{template_name}.txt", context),
        html_message=render_to_string(f"{template_name}.html", context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info("Sent '%s' to %s", subject, to_email)


@shared_task(
    bind=True,
    name='projects.tasks.send_bid_selected_email',
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    retry_backoff=True,
    queue='emails',
)
def send_bid_selected_email(self, bid_id):
    from .models import Bid

    try:
        bid = Bid.objects.select_related('project', 'seller').get(pk=bid_id)
    except Bid.DoesNotExist:
        logger.warning("Bid %s vanished before its selection email was sent", bid_id)
        return {'status': 'skipped', 'bid_id': bid_id}

    project = bid.project
    _send(
        bid.seller.email,
        f"Your bid for {project.title} has been selected!",
        'projects/emails/bid_selected',
        {'seller': bid.seller, 'project': project, 'bid': bid},
    )
    return {'status': 'sent', 'bid_id': bid_id}


@shared_task(
    bind=True,
    name='projects.tasks.send_project_completed_email',
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    retry_backoff=True,
    queue='emails',
)
def send_project_completed_email(self, project_id):
    from .models import Project

    try:
        project = Project.objects.select_related('buyer', 'selected_bid__seller').get(pk=project_id)
    except Project.DoesNotExist:
        logger.warning("Project %s vanished before its completion email was sent", project_id)
        return {'status': 'skipped', 'project_id': project_id}

    subject = f"Project {project.title} has been completed!"
    context = {'project': project, 'buyer': project.buyer}

    _send(project.buyer.email, subject, 'projects/emails/project_completed_buyer', context)

    recipients = 1
    if project.selected_bid_id:
        seller = project.selected_bid.seller
        _send(seller.email, subject, 'projects/emails/project_completed_seller',
              {**context, 'seller': seller})
        recipients += 1

    return {'status': 'sent', 'project_id': project_id, 'recipients': recipients}
