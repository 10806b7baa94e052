from rest_framework import status
from rest_framework.exceptions import APIException


class DuplicateApplication(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You have already applied for this job.'
    default_code = 'duplicate_application'


class JobNotAcceptingApplications(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This job is not accepting applications.'
    default_code = 'job_not_accepting_applications'


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid status transition.'
    default_code = 'invalid_transition'


class InvalidCancellationState(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Only pending or accepted applications can be cancelled.'
    default_code = 'invalid_cancellation_state'


class JobHasApplications(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Cannot delete a job that has applications.'
    default_code = 'job_has_applications'


class InsufficientBalance(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient balance.'
    default_code = 'insufficient_balance'


class DuplicateReview(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This application has already been reviewed.'
    default_code = 'duplicate_review'
