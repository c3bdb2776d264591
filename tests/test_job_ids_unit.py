# User value: This test keeps upload names predictable so every recording can be found by its job id.
import re
import unittest
from datetime import datetime, timezone, timedelta

from services.job_ids import input_blob_name, new_job_id, upload_extension
from services.status_resolver import normalize_job_id


class JobIdsUnitTests(unittest.TestCase):
    def test_job_id_format(self):
        now = datetime(2026, 2, 8, 22, 28, 53, tzinfo=timezone.utc)
        self.assertEqual(new_job_id(now, suffix="ab12cd34"), "20260208_222853_ab12cd34")

    def test_job_id_uses_utc(self):
        local = datetime(2026, 2, 9, 1, 28, 53, tzinfo=timezone(timedelta(hours=3)))
        self.assertTrue(new_job_id(local, suffix="x" * 8).startswith("20260208_222853_"))

    def test_random_suffix_shape(self):
        job_id = new_job_id()
        self.assertRegex(job_id, r"^\d{8}_\d{6}_[a-z0-9]{8}$")
        self.assertNotEqual(new_job_id(), new_job_id())

    def test_upload_extension(self):
        self.assertEqual(upload_extension("sermon.MP3"), "mp3")
        self.assertEqual(upload_extension("service.2024.m4a"), "m4a")
        self.assertEqual(upload_extension("weird.w-a_v"), "wav")
        self.assertEqual(upload_extension("noext"), "mp3")
        self.assertEqual(upload_extension("trailing."), "mp3")
        self.assertEqual(upload_extension(None), "mp3")

    def test_blob_name_round_trips_through_normalization(self):
        job_id = new_job_id()
        blob = input_blob_name(job_id, "Sunday Service.wav")
        self.assertTrue(re.match(rf"^{job_id}\.wav$", blob))
        self.assertEqual(normalize_job_id(blob), job_id)


if __name__ == "__main__":
    unittest.main()
