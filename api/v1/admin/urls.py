"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("generateKey", views.GenerateKeyView.as_view(), name="generate-key"),
    path("admin/keys", views.KeyListView.as_view(), name="admin-keys"),
    path("admin/keys/<int:key_id>", views.KeyDetailView.as_view(), name="admin-key-detail"),
    path("admin/keys/<int:key_id>/logs", views.KeyLogsView.as_view(), name="admin-key-logs"),
    path("admin/cleanup", views.CleanupView.as_view(), name="admin-cleanup"),
]
