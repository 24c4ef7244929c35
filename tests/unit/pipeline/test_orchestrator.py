"""Tests for the initialization pipeline orchestrator."""

from unittest.mock import patch

import pytest

from lazy_radial.config.settings import LayoutOptions
from lazy_radial.core.exceptions import LayoutError, PipelineError, ValidationError
from lazy_radial.core.generator import generate_multi_tree_dataset
from lazy_radial.pipeline import InitializationPipeline


class TestInitializationPipeline:
    @pytest.mark.asyncio
    async def test_stages_run_in_order(self):
        messages = []
        pipeline = InitializationPipeline(LayoutOptions(seed=2))

        result = await pipeline.run(generate_multi_tree_dataset(trees=3, seed=2), messages.append)

        stages = [m.stage for m in messages]
        first_seen = list(dict.fromkeys(stages))
        assert first_seen == ["data-adapt", "layout-calc", "style-gen"]
        progress = [m.progress for m in messages]
        assert progress == sorted(progress)
        assert progress[-1] == 70
        assert len(result.nodes) == result.graph.node_count
        assert result.root_ids == [f"tree{i}-root" for i in range(3)]

    @pytest.mark.asyncio
    async def test_metrics(self):
        result = await InitializationPipeline(LayoutOptions(seed=2)).run(
            generate_multi_tree_dataset(trees=2, seed=2)
        )
        metrics = result.performance_metrics

        for value in metrics.to_dict().values():
            assert isinstance(value, int)
            assert value >= 0
        assert metrics.total_time >= metrics.layout_calc_time

    @pytest.mark.asyncio
    async def test_to_dict_shape(self):
        result = await InitializationPipeline(LayoutOptions(seed=2)).run(
            {"id": "r", "children": [{"id": "c"}]}
        )
        payload = result.to_dict()

        assert set(payload) == {"nodes", "edges", "rootIds", "performanceMetrics"}
        assert payload["edges"][0]["type"] == "line"
        assert payload["nodes"][0]["style"]["x"] == payload["nodes"][0]["x"]

    @pytest.mark.asyncio
    async def test_validation_error_reported_then_raised(self):
        messages = []
        with pytest.raises(ValidationError):
            await InitializationPipeline().run(
                {"nodes": [{"id": "a"}, {"id": "a"}], "edges": []}, messages.append
            )

        error = messages[-1]
        assert error.stage == "error"
        assert "Duplicate" in error.error
        assert error.error_stack
        assert error.details["failed_stage"] == "data-adapt"
        assert not any(m.stage == "layout-calc" for m in messages)

    @pytest.mark.asyncio
    async def test_cyclic_dataset_fails_in_data_adapt(self):
        messages = []
        dataset = {
            "nodes": [{"id": "r"}, {"id": "a"}, {"id": "b"}],
            "edges": [
                {"source": "r", "target": "a"},
                {"source": "a", "target": "b"},
                {"source": "b", "target": "a"},
            ],
            "rootIds": ["r"],
        }
        with pytest.raises(ValidationError, match="more than one parent"):
            await InitializationPipeline().run(dataset, messages.append)

        assert messages[-1].details["failed_stage"] == "data-adapt"

    @pytest.mark.asyncio
    async def test_layout_error_stops_style_stage(self):
        messages = []
        dataset = {
            "nodes": [{"id": "r"}, {"id": "x", "data": {"groupId": 5, "hierarchy": 1}}],
            "edges": [],
            "rootIds": ["r"],
        }
        with pytest.raises(LayoutError):
            await InitializationPipeline(LayoutOptions(seed=1)).run(dataset, messages.append)

        assert messages[-1].stage == "error"
        assert messages[-1].details["failed_stage"] == "layout-calc"
        assert not any(m.stage == "style-gen" for m in messages)

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        pipeline = InitializationPipeline(LayoutOptions(seed=1))
        messages = []
        with patch.object(pipeline.style_gen, "execute", side_effect=KeyError("style")):
            with pytest.raises(PipelineError) as exc_info:
                await pipeline.run({"id": "r"}, messages.append)

        assert exc_info.value.stage == "style-gen"
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert messages[-1].stage == "error"
