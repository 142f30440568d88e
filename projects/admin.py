"""
Projects Admin - Django admin configuration.

Provides admin interface for:
- Projects (with their bids and deliverables inline)
- Bids
- Deliverables
- Reviews

Status and selected bid are read-only here; they only change through
projects.services.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Bid, Deliverable, Project, Review


# ============================================================================
# INLINES
# ============================================================================

class BidInline(admin.TabularInline):
    model = Bid
    extra = 0
    fields = ['seller', 'bid_amount', 'estimated_completion', 'created_at']
    readonly_fields = fields
    can_delete = False


class DeliverableInline(admin.TabularInline):
    model = Deliverable
    extra = 0
    fields = ['file_name', 'file_type', 'file_size', 'submitted_by', 'created_at']
    readonly_fields = fields
    can_delete = False


# ============================================================================
# PROJECTS
# ============================================================================

@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin for projects."""

    list_display = ['title', 'buyer', 'status', 'budget_display', 'deadline', 'created_at']
    list_filter = ['status']
    search_fields = ['title', 'description', 'buyer__email']
    readonly_fields = ['id', 'status', 'selected_bid', 'created_at', 'updated_at']
    raw_id_fields = ['buyer']
    date_hierarchy = 'created_at'
    inlines = [BidInline, DeliverableInline]

    fieldsets = (
        (_('Basic Info'), {
            'fields': ('id', 'buyer', 'title', 'description')
        }),
        (_('Budget & Timeline'), {
            'fields': ('budget_min', 'budget_max', 'deadline')
        }),
        (_('Lifecycle'), {
            'fields': ('status', 'selected_bid')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def budget_display(self, obj):
        return f"{obj.budget_min} - {obj.budget_max}"
    budget_display.short_description = _('Budget')


# ============================================================================
# BIDS
# ============================================================================

@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ['project', 'seller', 'bid_amount', 'estimated_completion', 'selected_badge']
    search_fields = ['project__title', 'seller__email']
    raw_id_fields = ['project', 'seller']
    readonly_fields = ['id', 'created_at', 'updated_at']

    def selected_badge(self, obj):
        if obj.project.selected_bid_id == obj.pk:
            return format_html('<span style="color: green;">&#10003; {}</span>', _('Selected'))
        return '-'
    selected_badge.short_description = _('Selected')


# ============================================================================
# DELIVERABLES
# ============================================================================

@admin.register(Deliverable)
class DeliverableAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'project', 'submitted_by', 'file_type', 'file_size', 'created_at']
    search_fields = ['file_name', 'project__title']
    raw_id_fields = ['project', 'submitted_by']
    readonly_fields = ['id', 'file_url', 'file_size', 'file_type', 'created_at', 'updated_at']


# ============================================================================
# REVIEWS
# ============================================================================

@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['project', 'buyer', 'seller', 'rating_stars', 'created_at']
    list_filter = ['rating']
    search_fields = ['project__title', 'seller__email', 'review_text']
    raw_id_fields = ['project', 'buyer', 'seller']
    readonly_fields = ['id', 'created_at', 'updated_at']

    def rating_stars(self, obj):
        return '★' * obj.rating + '☆' * (5 - obj.rating)
    rating_stars.short_description = _('Rating')
