"""
Sitewide Alert Admin Configuration
"""
from django.contrib import admin
from django.utils.html import format_html

from .models import SitewideAlert


@admin.register(SitewideAlert)
class SitewideAlertAdmin(admin.ModelAdmin):
    list_display = ['name', 'status_badge', 'style', 'dismissible', 'scheduled_alert',
                    'scheduled_start', 'scheduled_end', 'created_at']
    list_filter = ['status', 'style', 'scheduled_alert', 'created_at']
    search_fields = ['name', 'message']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Alert', {
            'fields': ('name', 'message', 'status', 'style', 'dismissible')
        }),
        ('Schedule', {
            'fields': ('scheduled_alert', 'scheduled_start', 'scheduled_end')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    actions = ['enable_alerts', 'disable_alerts']

    def status_badge(self, obj):
        if not obj.status:
            return format_html('<span style="color: #6c757d;">Inactive</span>')
        if obj.is_visible():
            return format_html('<span style="color: #28a745;">Active</span>')
        return format_html('<span style="color: #ffc107;">Scheduled</span>')
    status_badge.short_description = 'Status'

    def enable_alerts(self, request, queryset):
        count = 0
        for alert in queryset.inactive():
            alert.status = True
            alert.save()
            count += 1
        self.message_user(request, f'{count} alerts enabled.')
    enable_alerts.short_description = 'Enable selected alerts'

    def disable_alerts(self, request, queryset):
        count = 0
        for alert in queryset.active():
            alert.status = False
            alert.save()
            count += 1
        self.message_user(request, f'{count} alerts disabled.')
    disable_alerts.short_description = 'Disable selected alerts'
