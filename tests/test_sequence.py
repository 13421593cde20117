"""Tests for the ordered clip sequence."""

import pytest

from clipmaker.sequence import MAX_ITEMS, ClipItem, ClipSequence, ItemPatch


class TestInsertRemove:
    def test_starts_with_one_empty_item(self):
        seq = ClipSequence()
        assert len(seq) == 1
        assert seq[0].url == ""
        assert seq[0].video_id is None

    def test_insert_until_full(self):
        seq = ClipSequence()
        for _ in range(MAX_ITEMS - 1):
            assert seq.insert() is not None
        assert seq.is_full
        assert seq.insert() is None
        assert len(seq) == MAX_ITEMS

    def test_remove_last_item_leaves_fresh_one(self):
        seq = ClipSequence()
        seq.set_url(0, "https://youtu.be/dQw4w9WgXcQ")
        old_id = seq[0].id
        seq.remove(0)
        assert len(seq) == 1
        assert seq[0].id != old_id
        assert seq[0].url == ""

    def test_remove_middle(self):
        seq = ClipSequence([ClipItem(), ClipItem(), ClipItem()])
        a, b, c = seq.ids
        seq.remove(1)
        assert seq.ids == [a, c]


class TestUpdate:
    def test_patch_leaves_other_fields(self):
        seq = ClipSequence([ClipItem(url="u", video_id="v", clip_url="c")])
        seq.update(0, ItemPatch(clip_url=None))
        item = seq[0]
        assert (item.url, item.video_id, item.clip_url) == ("u", "v", None)

    def test_patch_raw_fields_go_to_range(self):
        seq = ClipSequence()
        seq.update(0, ItemPatch(raw_start="00:00:09"))
        assert seq[0].range.raw_start == "00:00:09"

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            ItemPatch(id="nope")

    def test_set_url_extracts_id_and_clears_clip(self):
        seq = ClipSequence([ClipItem(clip_url="old")])
        seq.set_url(0, "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=3")
        assert seq[0].video_id == "dQw4w9WgXcQ"
        assert seq[0].clip_url is None

    def test_set_url_invalid(self):
        seq = ClipSequence()
        seq.set_url(0, "https://example.com/video")
        assert seq[0].video_id is None


class TestReorder:
    def test_move_first_to_last(self):
        seq = ClipSequence([ClipItem(), ClipItem(), ClipItem()])
        a, b, c = seq.ids
        seq.reorder(a, c)
        assert seq.ids == [b, c, a]

    def test_move_last_to_first(self):
        seq = ClipSequence([ClipItem(), ClipItem(), ClipItem()])
        a, b, c = seq.ids
        seq.reorder(c, a)
        assert seq.ids == [c, a, b]

    def test_same_id_is_noop(self):
        seq = ClipSequence([ClipItem(), ClipItem()])
        before = seq.ids
        seq.reorder(before[0], before[0])
        assert seq.ids == before

    def test_identity_survives_updates(self):
        seq = ClipSequence([ClipItem(), ClipItem()])
        a, b = seq.ids
        seq.set_url(0, "https://youtu.be/dQw4w9WgXcQ")
        seq.reorder(a, b)
        assert seq.index_of(a) == 1
        assert seq[1].video_id == "dQw4w9WgXcQ"

    def test_unknown_id(self):
        seq = ClipSequence()
        with pytest.raises(KeyError):
            seq.reorder("missing", seq.ids[0])


class TestMergePayload:
    def test_skips_items_without_video(self):
        first = ClipItem(video_id="aaaaaaaaaaa")
        first.range.initialize(30)
        second = ClipItem()
        third = ClipItem(video_id="bbbbbbbbbbb")
        third.range.initialize(90)
        third.range.commit_start("00:00:15")

        payload = ClipSequence([first, second, third]).merge_payload()

        assert payload == [
            {"position": 1, "videoId": "aaaaaaaaaaa", "startTime": "00:00:00", "endTime": "00:00:30"},
            {"position": 2, "videoId": "bbbbbbbbbbb", "startTime": "00:00:15", "endTime": "00:01:30"},
        ]
