# interview/urls.py
from django.urls import path
from . import views

app_name = 'interview'

urlpatterns = [
    path('', views.interview_list, name='interview_list'),
    path('schedule/', views.schedule, name='schedule'),
    path('<uuid:pk>/pdf/', views.interview_pdf, name='interview_pdf'),
]
