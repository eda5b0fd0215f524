# listings/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # Listing wizard (authenticated)
    path('wizard/', views.listing_wizard, name='listing-wizard'),
    path('wizard/start/', views.start_listing, name='start-listing'),
    path('wizard/touch/', views.touch_field, name='touch-field'),
    path('wizard/upload-image/', views.upload_listing_image_view, name='upload-image'),
    path('wizard/confirm-location/', views.confirm_location, name='confirm-location'),
    path('wizard/advance/', views.advance_step, name='advance-step'),
    path('wizard/retreat/', views.retreat_step, name='retreat-step'),
    path('wizard/jump/', views.jump_to_step, name='jump-to-step'),
    path('wizard/undo/', views.undo_change, name='undo-change'),
    path('wizard/commit/', views.commit_listing, name='commit-listing'),

    # Host's own listings (authenticated)
    path('mine/', views.my_listings, name='my-listings'),
    path('mine/<str:listing_id>/', views.my_listing_detail, name='my-listing-detail'),

    # Public endpoints (unauthenticated)
    path('', views.listing_list, name='listing-list'),
    path('summary/', views.listing_summary, name='listing-summary'),
    path('detail/<str:listing_id>/', views.listing_detail, name='listing-detail'),
]
