from django.conf import settings
from apps.users.models import Worker
from apps.jobs.models import Job
from apps.notifications.utils import notify
import logging
import re

logger = logging.getLogger(__name__)


class MatchEngine:
    SKILL_WEIGHT = 0.4
    EXPERIENCE_WEIGHT = 0.3
    LOCATION_WEIGHT = 0.3

    STATE_MATCH_SCORE = 0.6
    CITY_MATCH_SCORE = 0.4

    @staticmethod
    def normalize_string(s):
        """Normalize strings for comparison."""
        return re.sub(r'\s+', ' ', (s or '').lower().strip())

    @classmethod
    def same_city(cls, worker, job):
        if settings.MATCH_LOCATION_FIELD_COMPAT:
            # Worker district is compared against the job city as stored
            return worker.district == job.city
        city = cls.normalize_string(job.city)
        return bool(city) and city in (
            cls.normalize_string(worker.district),
            cls.normalize_string(worker.village),
        )

    @classmethod
    def calculate_location_score(cls, worker, job):
        """0.6 for the same state, 1.0 when the city matches as well."""
        if worker.state != job.state:
            return 0.0
        score = cls.STATE_MATCH_SCORE
        if cls.same_city(worker, job):
            score += cls.CITY_MATCH_SCORE
        return score

    @classmethod
    def calculate_match_score(cls, worker, job):
        """
        Score how well a worker fits a job, from 0 to 1.

        Skills and experience count as present or absent; only the location
        component is graded. Rounded to two decimals so equal inputs always
        compare equal.
        """
        score = 0.0
        if worker.skills:
            score += cls.SKILL_WEIGHT
        if (worker.experience_years or 0) > 0:
            score += cls.EXPERIENCE_WEIGHT
        score += cls.calculate_location_score(worker, job) * cls.LOCATION_WEIGHT
        return round(score, 2)

    @staticmethod
    def _rank(matches, limit=None):
        # sorted() is stable, so equal scores keep primary key order
        ranked = sorted(matches, key=lambda m: m['score'], reverse=True)
        return ranked[:limit] if limit else ranked

    @classmethod
    def find_matching_jobs(cls, worker, min_score=None, limit=None):
        """Active jobs in the worker's state scoring at least ``min_score``, best first."""
        if min_score is None:
            min_score = settings.MATCH_MIN_SCORE
        jobs = Job.objects.filter(state=worker.state, status='active').select_related('employer').order_by('id')
        matches = []
        for job in jobs:
            score = cls.calculate_match_score(worker, job)
            if score >= min_score:
                matches.append({'job': job, 'score': score})
        return cls._rank(matches, limit)

    @classmethod
    def find_matching_workers(cls, job, min_score=None, limit=None):
        """Available workers in the job's state scoring at least ``min_score``, best first."""
        if min_score is None:
            min_score = settings.MATCH_MIN_SCORE
        workers = Worker.objects.filter(state=job.state, is_available=True).order_by('id')
        matches = []
        for worker in workers:
            score = cls.calculate_match_score(worker, job)
            if score >= min_score:
                matches.append({'worker': worker, 'score': score})
        return cls._rank(matches, limit)

    @classmethod
    def notify_matching_workers(cls, job):
        """
        Tell strongly matching workers about a newly posted job.

        Returns how many matches were considered. Errors are logged and
        reported as 0; the job itself is already saved.

        Delivery is inline: job creation schedules this with
        ``transaction.on_commit``, which under autocommit runs before the
        response is returned, so each strong match costs one SMS and email
        send within the posting request. There is no task queue.
        """
        try:
            matches = cls.find_matching_workers(job)
            notified = 0
            for match in matches:
                if match['score'] >= settings.MATCH_NOTIFY_THRESHOLD:
                    notify(match['worker'].id, 'worker', 'new_job_match', {
                        'job_id': job.id,
                        'job_title': job.title,
                        'city': job.city,
                        'salary': str(job.salary),
                        'score': match['score'],
                    })
                    notified += 1
            logger.info(f"Job {job.id}: {len(matches)} matching workers, {notified} notified")
            return len(matches)
        except Exception as e:
            logger.error(f"Error notifying matching workers for job {job.id}: {str(e)}")
            return 0
