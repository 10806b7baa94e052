# core/constants.py
JOB_STATUS_CHOICES = (
    ('draft', 'Draft'),              # Saved by the employer, not yet visible
    ('active', 'Active'),            # Open for applications
    ('in-progress', 'In Progress'),  # Work has started
    ('completed', 'Completed'),      # Every accepted application is completed
    ('closed', 'Closed'),            # Closed by the employer
)

JOB_APPLICATION_STATUS_CHOICES = (
    ('pending', 'Pending'),          # Worker applied, awaiting employer response
    ('accepted', 'Accepted'),        # Employer accepted the application
    ('rejected', 'Rejected'),        # Employer rejected the application
    ('in-progress', 'In Progress'),  # Worker has started the job
    ('completed', 'Completed'),      # Job done, settlement triggered
)

# Allowed status moves for a job application; anything else is rejected
APPLICATION_TRANSITIONS = {
    'pending': ('accepted', 'rejected'),
    'accepted': ('in-progress',),
    'in-progress': ('completed',),
    'rejected': (),
    'completed': (),
}

CANCELLABLE_APPLICATION_STATUSES = ('pending', 'accepted')

# Applications the employer has taken on; used for job auto-completion
ENGAGED_APPLICATION_STATUSES = ('accepted', 'in-progress', 'completed')

PAYMENT_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('paid', 'Paid'),
)

JOB_CATEGORY_CHOICES = (
    ('Agriculture', 'Agriculture'),
    ('Construction', 'Construction'),
    ('Domestic', 'Domestic'),
    ('Manufacturing', 'Manufacturing'),
    ('Transportation', 'Transportation'),
    ('Retail', 'Retail'),
    ('Food Service', 'Food Service'),
    ('General', 'General'),
)

EMPLOYMENT_TYPE_CHOICES = (
    ('Full-time', 'Full-time'),
    ('Part-time', 'Part-time'),
    ('Contract', 'Contract'),
    ('Temporary', 'Temporary'),
    ('Daily wage', 'Daily wage'),
)

LOCATION_TYPE_CHOICES = (
    ('onsite', 'Onsite'),
    ('remote', 'Remote'),
    ('hybrid', 'Hybrid'),
)

GENDER_CHOICES = (
    ('Male', 'Male'),
    ('Female', 'Female'),
    ('Other', 'Other'),
)

WITHDRAWAL_METHOD_CHOICES = (
    ('bank_transfer', 'Bank Transfer'),
    ('upi', 'UPI'),
    ('cash', 'Cash'),
)

WITHDRAWAL_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('completed', 'Completed'),
    ('failed', 'Failed'),
)

RECIPIENT_TYPE_CHOICES = (
    ('worker', 'Worker'),
    ('employer', 'Employer'),
)

NOTIFICATION_EVENT_CHOICES = (
    ('new_job_match', 'New Job Match'),
    ('new_application', 'New Application'),
    ('application_accepted', 'Application Accepted'),
    ('application_rejected', 'Application Rejected'),
    ('application_withdrawn', 'Application Withdrawn'),
    ('job_started', 'Job Started'),
    ('job_completed', 'Job Completed'),
    ('payment_received', 'Payment Received'),
    ('withdrawal_requested', 'Withdrawal Requested'),
)
