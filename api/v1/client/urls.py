"""
URL configuration for client API endpoints.
"""

from django.urls import path

from api.v1.client import views

urlpatterns = [
    path("activateKey", views.ActivateKeyView.as_view(), name="activate-key"),
    path("verifyKey", views.VerifyKeyView.as_view(), name="verify-key"),
]
