# jobs/urls.py
from django.urls import path
from . import views

app_name = 'jobs'

urlpatterns = [
    # job listing / detail
    path('', views.job_list, name='job_list'),                     # /jobs/
    path('<int:job_id>/', views.job_detail, name='job_detail'),    # /jobs/3/

    # application flow
    path('<int:job_id>/apply/', views.apply, name='job_apply'),                    # /jobs/3/apply/
    path('<int:job_id>/apply/success/', views.apply_success, name='apply_success'),
]
