# User value: This test validates upload URL issuance and queue hand-off so recordings reach the worker once.
import json
import unittest
from unittest.mock import patch

from fastapi import HTTPException

from fakes import FakeContainer, FakeRedis
from routes.upload import get_upload_url, upload_complete
from schemas.requests import UploadCompleteRequest, UploadUrlRequest
from services.job_history import JobHistoryRepository


class GetUploadUrlUnitTests(unittest.TestCase):
    def test_returns_signed_url_and_job_id(self):
        inputs = FakeContainer("audio-input")
        out = get_upload_url(payload=UploadUrlRequest(filename="Sunday.M4A", contentType="audio/mp4"), inputs=inputs)

        self.assertRegex(out.jobId, r"^\d{8}_\d{6}_[a-z0-9]{8}$")
        self.assertEqual(out.blobName, f"{out.jobId}.m4a")
        self.assertEqual(out.containerName, "audio-input")
        self.assertIn(out.blobName, out.uploadUrl)
        self.assertTrue(out.expiresOn.endswith("Z"))

    def test_missing_filename_is_400(self):
        with self.assertRaises(HTTPException) as ctx:
            get_upload_url(payload=UploadUrlRequest(filename="  "), inputs=FakeContainer("audio-input"))
        self.assertEqual(ctx.exception.status_code, 400)

    def test_unsupported_extension_is_400(self):
        with self.assertRaises(HTTPException) as ctx:
            get_upload_url(payload=UploadUrlRequest(filename="Sunday.aiff"), inputs=FakeContainer("audio-input"))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail["error_code"], "UNSUPPORTED_AUDIO_FORMAT")

    def test_signing_failure_is_500(self):
        with self.assertRaises(HTTPException) as ctx:
            get_upload_url(
                payload=UploadUrlRequest(filename="a.mp3"),
                inputs=FakeContainer("audio-input", fail_list=True),
            )
        self.assertEqual(ctx.exception.status_code, 500)


class UploadCompleteUnitTests(unittest.TestCase):
    def setUp(self):
        self.redis = FakeRedis()
        self.patcher = patch("services.queue.r", self.redis)
        self.patcher.start()
        self.inputs = FakeContainer("audio-input", {"20260208_222853_ab12cd34.mp3": b"audio"})
        self.outputs = FakeContainer("transcripts")
        self.history = JobHistoryRepository(FakeRedis())

    def tearDown(self):
        self.patcher.stop()

    def _call(self, payload, user_id=None):
        return upload_complete(
            payload=payload,
            user_id=user_id,
            inputs=self.inputs,
            outputs=self.outputs,
            history=self.history,
        )

    def _payload(self, **kwargs):
        data = {
            "jobId": "20260208_222853_ab12cd34",
            "blobName": "20260208_222853_ab12cd34.mp3",
            "originalName": "Sunday Service.mp3",
        }
        data.update(kwargs)
        return UploadCompleteRequest(**data)

    def test_publishes_job_descriptor(self):
        out = self._call(self._payload(interpreterMode=True, englishOnly=True))

        self.assertEqual(out.status, "queued")
        self.assertFalse(out.reused)
        queued = self.redis.lists[out.queue]
        self.assertEqual(len(queued), 1)
        message = json.loads(queued[0])
        self.assertEqual(message["job_id"], "20260208_222853_ab12cd34")
        self.assertEqual(message["blob_name"], "20260208_222853_ab12cd34.mp3")
        self.assertEqual(message["container"], "audio-input")
        self.assertEqual(message["output_container"], "transcripts")
        self.assertEqual(message["original_name"], "Sunday Service.mp3")
        self.assertIs(message["interpreter_present"], True)
        self.assertEqual(message["transcribe_option"], "english_only")

    def test_repeat_call_is_not_enqueued_twice(self):
        first = self._call(self._payload())
        second = self._call(self._payload())
        self.assertFalse(first.reused)
        self.assertTrue(second.reused)
        self.assertEqual(len(self.redis.lists[first.queue]), 1)

    def test_missing_fields_are_400(self):
        for payload in (self._payload(jobId=""), self._payload(blobName=" ")):
            with self.assertRaises(HTTPException) as ctx:
                self._call(payload)
            self.assertEqual(ctx.exception.status_code, 400)

    def test_blob_from_other_job_is_400(self):
        with self.assertRaises(HTTPException) as ctx:
            self._call(self._payload(blobName="someone_else.mp3"))
        self.assertEqual(ctx.exception.status_code, 400)

    def test_missing_upload_is_404(self):
        self.inputs.objects.clear()
        with self.assertRaises(HTTPException) as ctx:
            self._call(self._payload())
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(self.redis.lists, {})

    def test_queue_failure_is_500(self):
        self.redis.fail_push = True
        with self.assertRaises(HTTPException) as ctx:
            self._call(self._payload())
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail["error_code"], "QUEUE_UNAVAILABLE")

    def test_records_history_for_user(self):
        self._call(self._payload(), user_id="user-1")
        entries = self.history.load("user-1")
        self.assertEqual([e.jobId for e in entries], ["20260208_222853_ab12cd34"])
        self.assertEqual(entries[0].originalName, "Sunday Service.mp3")
        self.assertEqual(entries[0].status, "queued")


if __name__ == "__main__":
    unittest.main()
