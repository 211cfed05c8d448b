"""Tests for admin dashboard figures."""

from thinktank_api.services import analytics_service


class TestAdminStats:
    async def test_first_row_of_rpc(self, store) -> None:
        store.rpc_results["get_admin_stats"] = [
            {
                "total_reports": 4,
                "public_reports": 2,
                "total_content": 9,
                "published_content": 7,
                "recent_uploads": 3,
                "total_users": 12,
            }
        ]
        stats = await analytics_service.get_admin_stats(store)
        assert stats.total_content == 9
        assert stats.total_users == 12

    async def test_empty_result_is_zeros(self, store) -> None:
        store.rpc_results["get_admin_stats"] = []
        stats = await analytics_service.get_admin_stats(store)
        assert stats.total_reports == 0


class TestCounts:
    async def test_content_by_type(self, store) -> None:
        store.seed("content", {"type": "blog"}, {"type": "article"}, {"type": "blog"}, {"type": None})
        counts = await analytics_service.count_content_by_type(store)
        assert [(c.type, c.count) for c in counts] == [("blog", 2), ("article", 1), ("unknown", 1)]

    async def test_active_counts(self, store) -> None:
        store.seed("opportunities", {"is_active": True}, {"is_active": False})
        store.seed("partners", {"active": True}, {"active": True})
        assert await analytics_service.count_active(store) == (1, 2)
