"""Unit tests for image enrichment and its fallback cascade."""

import asyncio
from typing import Optional

import pytest

from cinescout.models import Spot, TravelGuide
from cinescout.services.enrichment import (
    FALLBACK_IMAGE_URL,
    ImageEnrichmentService,
    build_spot_queries,
    clean_spot_name,
)
from conftest import FakeImageService


class SlowImageService(FakeImageService):
    """Holds each lookup open briefly and tracks how many overlap."""

    def __init__(self, delay: float = 0.02, **kwargs) -> None:
        super().__init__(**kwargs)
        self.delay = delay
        self.in_flight = 0
        self.peak = 0

    async def search(self, query: str) -> Optional[str]:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return await super().search(query)
        finally:
            self.in_flight -= 1


class TestCleanSpotName:

    def test_parenthetical_is_dropped(self) -> None:
        assert clean_spot_name("Kinkaku-ji (Golden Pavilion)") == "Kinkaku-ji"

    def test_dash_separated_suffix_is_dropped(self) -> None:
        assert clean_spot_name("Tokyo Tower - Night View") == "Tokyo Tower"

    def test_en_dash_suffix_is_dropped(self) -> None:
        assert clean_spot_name("Senso-ji – Main Hall") == "Senso-ji"

    def test_plain_name_is_unchanged(self) -> None:
        assert clean_spot_name("  Shibuya Crossing ") == "Shibuya Crossing"

    def test_name_that_would_be_emptied_is_kept(self) -> None:
        assert clean_spot_name("(Untitled)") == "(Untitled)"


class TestBuildSpotQueries:

    def test_cascade_order(self) -> None:
        spot = Spot(name="Kinkaku-ji (Golden Pavilion)", city="Kyoto", category="Temple")
        assert build_spot_queries(spot) == [
            "Kinkaku-ji Kyoto",
            "Kinkaku-ji",
            "Temple Kyoto",
        ]

    def test_missing_category_uses_default(self) -> None:
        spot = Spot(name="Gion", city="Kyoto", category="")
        assert build_spot_queries(spot)[2] == "tourist attraction Kyoto"


class TestEnrich:

    @pytest.mark.asyncio
    async def test_without_provider_is_noop(self, guide: TravelGuide) -> None:
        before = guide.model_dump()
        service = ImageEnrichmentService(None)

        result = await service.enrich(guide)

        assert result is guide
        assert result.model_dump() == before

    @pytest.mark.asyncio
    async def test_first_stage_hit(self, guide: TravelGuide) -> None:
        images = FakeImageService(default="https://img.example/any.jpg")
        service = ImageEnrichmentService(images)

        await service.enrich(guide)

        assert guide.destination_image_url == "https://img.example/any.jpg"
        assert "Kyoto travel" in images.queries
        assert all(spot.image_url == "https://img.example/any.jpg" for spot in guide.spots)
        # One cover query plus exactly one query per spot
        assert len(images.queries) == 1 + len(guide.spots)

    @pytest.mark.asyncio
    async def test_cascade_reaches_category_stage(self) -> None:
        guide = TravelGuide(
            destination="Kyoto",
            spots=[Spot(name="Kinkaku-ji (Golden Pavilion)", city="Kyoto", category="Temple")],
        )
        images = FakeImageService(results={"Temple Kyoto": "https://img.example/temple.jpg"})
        service = ImageEnrichmentService(images)

        await service.enrich(guide)

        spot_queries = [q for q in images.queries if q != "Kyoto travel"]
        assert spot_queries == ["Kinkaku-ji Kyoto", "Kinkaku-ji", "Temple Kyoto"]
        assert guide.spots[0].image_url == "https://img.example/temple.jpg"

    @pytest.mark.asyncio
    async def test_cascade_ends_with_fixed_fallback(self) -> None:
        guide = TravelGuide(
            destination="Kyoto",
            spots=[Spot(name="Kinkaku-ji (Golden Pavilion)", city="Kyoto", category="Temple")],
        )
        images = FakeImageService()
        service = ImageEnrichmentService(images)

        await service.enrich(guide)

        assert images.queries[-3:] == ["Kinkaku-ji Kyoto", "Kinkaku-ji", "Temple Kyoto"]
        assert guide.spots[0].image_url == FALLBACK_IMAGE_URL
        assert guide.destination_image_url is None

    @pytest.mark.asyncio
    async def test_second_stage_stops_cascade(self) -> None:
        guide = TravelGuide(
            destination="Kyoto",
            spots=[Spot(name="Kinkaku-ji (Golden Pavilion)", city="Kyoto", category="Temple")],
        )
        images = FakeImageService(results={"Kinkaku-ji": "https://img.example/kinkaku.jpg"})
        service = ImageEnrichmentService(images)

        await service.enrich(guide)

        assert "Temple Kyoto" not in images.queries
        assert guide.spots[0].image_url == "https://img.example/kinkaku.jpg"

    @pytest.mark.asyncio
    async def test_lookup_errors_count_as_no_result(self) -> None:
        guide = TravelGuide(
            destination="Kyoto",
            spots=[Spot(name="Gion", city="Kyoto", category="District")],
        )
        images = FakeImageService(
            results={"Gion": "https://img.example/gion.jpg"},
            errors={"Gion Kyoto", "Kyoto travel"},
        )
        service = ImageEnrichmentService(images)

        result = await service.enrich(guide)

        assert result.spots[0].image_url == "https://img.example/gion.jpg"
        assert result.destination_image_url is None

    @pytest.mark.asyncio
    async def test_spot_order_is_preserved(self, guide: TravelGuide) -> None:
        names = [spot.name for spot in guide.spots]
        images = FakeImageService(
            results={
                "Arashiyama Bamboo Grove Kyoto": "https://img.example/bamboo.jpg",
                "Shrine Kyoto": "https://img.example/shrine.jpg",
            },
        )
        service = ImageEnrichmentService(images, max_concurrency=1)

        await service.enrich(guide)

        assert [spot.name for spot in guide.spots] == names
        assert guide.spots[0].image_url == FALLBACK_IMAGE_URL
        assert guide.spots[1].image_url == "https://img.example/shrine.jpg"
        assert guide.spots[2].image_url == "https://img.example/bamboo.jpg"

    @pytest.mark.asyncio
    async def test_enriching_twice_only_touches_images(self, guide: TravelGuide) -> None:
        service = ImageEnrichmentService(FakeImageService(default="https://img.example/first.jpg"))
        await service.enrich(guide)
        first = guide.model_dump()

        service = ImageEnrichmentService(FakeImageService(default="https://img.example/second.jpg"))
        await service.enrich(guide)
        second = guide.model_dump()

        assert [s["name"] for s in second["spots"]] == [s["name"] for s in first["spots"]]
        for before, after in zip(first["spots"], second["spots"]):
            before.pop("image_url")
            assert after.pop("image_url") == "https://img.example/second.jpg"
            assert before == after
        first.pop("destination_image_url")
        second.pop("destination_image_url")
        first.pop("spots")
        second.pop("spots")
        assert first == second

    @pytest.mark.asyncio
    async def test_guide_without_spots(self) -> None:
        guide = TravelGuide(destination="Nowhere")
        images = FakeImageService(default="https://img.example/cover.jpg")

        result = await ImageEnrichmentService(images).enrich(guide)

        assert result.spots == []
        assert result.destination_image_url == "https://img.example/cover.jpg"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_concurrency", [2, 3])
    async def test_spot_lookups_overlap_up_to_the_cap(self, max_concurrency: int) -> None:
        guide = TravelGuide(
            destination="Lisbon",
            spots=[Spot(name=f"Miradouro {i}", category="Viewpoint") for i in range(8)],
        )
        images = SlowImageService(default="https://img.example/view.jpg")
        service = ImageEnrichmentService(images, max_concurrency=max_concurrency)

        await service.enrich(guide)

        assert len(guide.spots) > max_concurrency
        assert 1 < images.peak <= max_concurrency
        assert all(spot.image_url == "https://img.example/view.jpg" for spot in guide.spots)

    @pytest.mark.asyncio
    async def test_cap_of_one_serializes_lookups(self) -> None:
        guide = TravelGuide(
            destination="Lisbon",
            spots=[Spot(name=f"Miradouro {i}") for i in range(4)],
        )
        images = SlowImageService(delay=0.01)
        service = ImageEnrichmentService(images, max_concurrency=1)

        await service.enrich(guide)

        assert images.peak == 1
        assert all(spot.image_url == FALLBACK_IMAGE_URL for spot in guide.spots)
