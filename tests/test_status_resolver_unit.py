# User value: This test pins down how job status is derived from storage so polling users see the right state.
import unittest

from fakes import FakeContainer
from services.errors import InvalidJobIdError, StorageUnavailableError
from services.status_resolver import normalize_job_id, resolve_job_status


def _resolve(job_id, inputs=None, outputs=None):
    return resolve_job_status(
        job_id,
        inputs=inputs or FakeContainer("audio-input"),
        outputs=outputs or FakeContainer("transcripts"),
    )


class NormalizeJobIdUnitTests(unittest.TestCase):
    def test_strips_known_audio_extension(self):
        self.assertEqual(normalize_job_id("abc123.mp3"), "abc123")
        self.assertEqual(normalize_job_id("abc123.M4A"), "abc123")
        self.assertEqual(normalize_job_id("  20260208_222853_ab12cd34.wav "), "20260208_222853_ab12cd34")

    def test_keeps_bare_and_unknown_suffixes(self):
        self.assertEqual(normalize_job_id("abc123"), "abc123")
        self.assertEqual(normalize_job_id("1976-12-19.notes"), "1976-12-19.notes")

    def test_only_one_trailing_extension_is_removed(self):
        self.assertEqual(normalize_job_id("abc.mp3.mp3"), "abc.mp3")

    def test_blank_is_rejected(self):
        for raw in (None, "", "   ", ".mp3"):
            with self.assertRaises(InvalidJobIdError):
                normalize_job_id(raw)


class StatusResolverUnitTests(unittest.TestCase):
    def test_not_found_when_neither_container_matches(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        out = _resolve("job9", inputs=inputs)
        self.assertEqual(out.to_payload(), {"jobId": "job9", "status": "not_found"})

    def test_processing_when_only_input_exists(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        out = _resolve("job1", inputs=inputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "processing"})

    def test_completed_with_metadata(self):
        outputs = FakeContainer(
            "transcripts",
            {"job1.paragraphs.json": {"paragraphs": [], "processing_time": 42, "duration": 930}},
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(
            out.to_payload(),
            {"jobId": "job1", "status": "completed", "processingTime": 42, "audioDuration": 930},
        )

    def test_completed_regardless_of_input_presence(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        outputs = FakeContainer("transcripts", {"job1.paragraphs.json": {"paragraphs": [], "duration": 12.5}})
        out = _resolve("job1", inputs=inputs, outputs=outputs)
        self.assertEqual(out.status, "completed")
        self.assertEqual(out.audioDuration, 12.5)
        self.assertIsNone(out.processingTime)
        # completion short-circuits the inputs probe
        self.assertEqual(inputs.list_calls, [])

    def test_malformed_marker_still_completed_without_metadata(self):
        outputs = FakeContainer("transcripts", {"job1.paragraphs.json": b'{"paragraphs": [{"segm'})
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed"})

    def test_non_object_marker_still_completed(self):
        outputs = FakeContainer("transcripts", {"job1.paragraphs.json": b"[1, 2, 3]"})
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed"})

    def test_unreadable_marker_still_completed(self):
        outputs = FakeContainer("transcripts", {"job1.paragraphs.json": {"duration": 3}}, fail_read=True)
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed"})

    def test_non_numeric_metadata_is_dropped_individually(self):
        outputs = FakeContainer(
            "transcripts",
            {"job1.paragraphs.json": {"paragraphs": [], "processing_time": "slow", "duration": True}},
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed"})

        outputs.put("job1.paragraphs.json", {"paragraphs": [], "processing_time": 7, "duration": "930"})
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed", "processingTime": 7})

    def test_non_finite_metadata_is_dropped(self):
        outputs = FakeContainer(
            "transcripts",
            {"job1.paragraphs.json": b'{"paragraphs": [], "duration": NaN, "processing_time": Infinity}'},
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed"})

    def test_negative_metadata_is_dropped(self):
        outputs = FakeContainer(
            "transcripts",
            {"job1.paragraphs.json": {"paragraphs": [], "duration": -1, "processing_time": 0}},
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "completed", "processingTime": 0})

    def test_other_outputs_without_marker_are_not_completion(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        outputs = FakeContainer("transcripts", {"job1.partial.txt": b"..."})
        out = _resolve("job1", inputs=inputs, outputs=outputs)
        self.assertEqual(out.status, "processing")

    def test_multiple_markers_take_first_lexicographic(self):
        outputs = FakeContainer(
            "transcripts",
            {
                "job1_b.paragraphs.json": {"duration": 2},
                "job1_a.paragraphs.json": {"duration": 1},
            },
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.audioDuration, 1)

    def test_extension_normalization_gives_same_result(self):
        inputs = FakeContainer("audio-input", {"abc123.mp3": b"audio"})
        outputs = FakeContainer("transcripts", {"abc123.paragraphs.json": {"duration": 5}})
        a = _resolve("abc123.mp3", inputs=inputs, outputs=outputs)
        b = _resolve("abc123", inputs=inputs, outputs=outputs)
        self.assertEqual(a, b)
        self.assertEqual(a.jobId, "abc123")
        self.assertEqual(outputs.list_calls, ["abc123", "abc123"])

    def test_repeated_queries_are_identical(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        outputs = FakeContainer("transcripts", {"job1.paragraphs.json": {"duration": 1, "processing_time": 2}})
        first = _resolve("job1", inputs=inputs, outputs=outputs)
        for _ in range(3):
            self.assertEqual(_resolve("job1", inputs=inputs, outputs=outputs), first)
        self.assertEqual(outputs.writes, [])

    def test_failure_marker_yields_failed(self):
        inputs = FakeContainer("audio-input", {"job1.mp3": b"audio"})
        outputs = FakeContainer("transcripts", {"job1.error.json": {"error": "model crashed"}})
        out = _resolve("job1", inputs=inputs, outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "failed", "error": "model crashed"})

    def test_unreadable_failure_marker_still_failed(self):
        outputs = FakeContainer("transcripts", {"job1.error.json": b"not json"})
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.to_payload(), {"jobId": "job1", "status": "failed"})

    def test_completion_wins_over_failure_marker(self):
        outputs = FakeContainer(
            "transcripts",
            {"job1.error.json": {"error": "retrying"}, "job1.paragraphs.json": {"paragraphs": []}},
        )
        out = _resolve("job1", outputs=outputs)
        self.assertEqual(out.status, "completed")

    def test_outputs_listing_failure_propagates(self):
        outputs = FakeContainer("transcripts", fail_list=True)
        with self.assertRaises(StorageUnavailableError):
            _resolve("job1", outputs=outputs)

    def test_inputs_listing_failure_propagates(self):
        inputs = FakeContainer("audio-input", fail_list=True)
        with self.assertRaises(StorageUnavailableError):
            _resolve("job1", inputs=inputs)

    def test_blank_job_id_is_invalid(self):
        with self.assertRaises(InvalidJobIdError):
            _resolve("   ")


if __name__ == "__main__":
    unittest.main()
