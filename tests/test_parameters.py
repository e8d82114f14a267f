import pytest
from pydantic import ValidationError

from unstructured_client import ChunkingStrategy, OutputFormat, PartitionParameters, Strategy


def test_default_parameters_send_no_fields():
    assert PartitionParameters().to_form_fields() == {}


def test_set_parameters_are_serialized_and_unset_ones_absent():
    params = PartitionParameters(
        coordinates=True,
        include_orig_elements=False,
        languages=["eng", "deu"],
        strategy="hi_res",
        chunking_strategy=ChunkingStrategy.BY_TITLE,
        max_characters=1000,
        similarity_threshold=0.5,
        output_format="text/csv",
    )

    assert params.to_form_fields() == {
        "coordinates": "true",
        "include_orig_elements": "false",
        "languages": '["eng", "deu"]',
        "strategy": "hi_res",
        "chunking_strategy": "by_title",
        "max_characters": "1000",
        "similarity_threshold": "0.5",
        "output_format": "text/csv",
    }


def test_explicit_empty_list_is_sent():
    fields = PartitionParameters(skip_infer_table_types=[]).to_form_fields()
    assert fields == {"skip_infer_table_types": "[]"}


def test_string_values_become_enums():
    params = PartitionParameters(strategy="ocr_only", output_format="application/json")
    assert params.strategy is Strategy.OCR_ONLY
    assert params.output_format is OutputFormat.APPLICATION_JSON


@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_similarity_threshold_is_bounded(value):
    with pytest.raises(ValidationError):
        PartitionParameters(similarity_threshold=value)


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValidationError):
        PartitionParameters(strategy="slow")


def test_misspelled_parameter_is_rejected():
    with pytest.raises(ValidationError):
        PartitionParameters(stratgy="fast")


def test_parameters_are_immutable():
    params = PartitionParameters(overlap=10)
    with pytest.raises(ValidationError):
        params.overlap = 20


def test_list_parameters_are_stored_as_tuples():
    params = PartitionParameters(languages=["eng"], extract_image_block_types=["Image", "Table"])

    assert params.languages == ("eng",)
    assert params.extract_image_block_types == ("Image", "Table")
    with pytest.raises(AttributeError):
        params.languages.append("deu")
