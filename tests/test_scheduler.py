import unittest
from datetime import date, datetime, time

from stockledger.core.scheduler import DailyScheduler, next_run_after, parse_run_time


class DailySchedulerTest(unittest.TestCase):
    def test_run_pending_passes_run_date(self):
        seen = []
        scheduler = DailyScheduler()
        job = scheduler.add_daily_job("carry-forward", "00:05", seen.append)
        job.next_run = datetime.now()
        scheduler.run_pending()

        self.assertEqual(seen, [date.today()])
        self.assertEqual(job.last_run_date, date.today())
        self.assertGreater(job.next_run, datetime.now())

    def test_failed_job_records_error(self):
        def job_func(_run_date):
            raise ValueError("no rows")

        scheduler = DailyScheduler()
        job = scheduler.add_daily_job("broken", "01:00", job_func)
        with self.assertLogs("stockledger.core.scheduler", level="ERROR"):
            scheduler.run_job(job, date(2026, 5, 1))
        self.assertEqual(job.last_error, "no rows")

    def test_time_parsing(self):
        self.assertEqual(parse_run_time("07:30"), time(7, 30))
        with self.assertRaises(ValueError):
            parse_run_time("7")
        now = datetime(2026, 5, 1, 8, 0)
        self.assertEqual(next_run_after(time(7, 30), now), datetime(2026, 5, 2, 7, 30))
        self.assertEqual(next_run_after(time(9, 0), now), datetime(2026, 5, 1, 9, 0))


if __name__ == "__main__":
    unittest.main()
