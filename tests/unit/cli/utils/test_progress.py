"""Unit tests for stage progress output."""

from wfm_sync.cli.utils.progress import StageProgress


class TestStageProgress:
    """Test suite for StageProgress."""

    def test_header_of_first_stage(self):
        """Test the numbered header before anything ran."""
        progress = StageProgress(["Reading", "Uploading"], echo=lambda _: None)

        assert progress.header() == "[1/2] Reading"
        assert not progress.complete

    def test_done_announces_next_stage(self):
        """Test that finishing a stage prints its detail and the next header."""
        lines = []
        progress = StageProgress(["Reading", "Uploading"], echo=lines.append)

        progress.begin()
        progress.done("Read 4 entries")

        assert lines == ["[1/2] Reading", "  Read 4 entries", "[2/2] Uploading"]

    def test_complete_after_last_stage(self):
        """Test that the last done() prints nothing further."""
        lines = []
        progress = StageProgress(["Reading"], echo=lines.append)

        progress.begin()
        progress.done()

        assert progress.complete
        assert lines == ["[1/1] Reading"]
        assert progress.header() == "[1/1] Complete"
