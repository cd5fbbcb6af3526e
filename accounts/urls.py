from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

router = DefaultRouter()
router.register(r"users", views.UserAdminViewSet, basename="admin-user")

urlpatterns = [
    path("register/", views.register),
    path("login/", views.login_password),
    path("token/refresh/", TokenRefreshView.as_view()),
    path("me/", views.me),
    path("dashboard/", views.dashboard),
    path("doctors/", views.doctors),
    path("", include(router.urls)),
]
