"""Type-specific field settings.

``FieldSchema.type_config`` is a tagged union: the ``$type`` key of the JSON
payload names the variant and must survive a round trip unchanged.
"""

from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import Field

from .base import SchemaModel

if TYPE_CHECKING:
    from .field import FieldOption, FieldSchema


class AutoCompleteConfig(SchemaModel):
    kind: Literal["autocomplete"] = Field(default="autocomplete", alias="$type")
    data_source_url: str
    query_parameter: str = "q"
    min_characters: int = Field(default=3, ge=0)
    value_field: str
    display_field: str
    item_template: str | None = None


class DataGridConfig(SchemaModel):
    kind: Literal["datagrid"] = Field(default="datagrid", alias="$type")
    allow_add: bool = True
    allow_edit: bool = True
    allow_delete: bool = True
    max_rows: int | None = Field(default=None, ge=0)
    editor_mode: Literal["Modal", "Inline"] = "Modal"
    columns: list["FieldSchema"] = Field(default_factory=list)


class FileUploadConfig(SchemaModel):
    kind: Literal["fileupload"] = Field(default="fileupload", alias="$type")
    allowed_extensions: list[str] = Field(default_factory=list)
    max_file_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)  # 10MB
    allow_multiple: bool = False
    scan_required: bool = True


class DateConfig(SchemaModel):
    """Date bounds; ``min_date``/``max_date`` are ISO 8601 dates or ``Now``,
    ``Now+30d``, ``Now-1y`` style offsets."""

    kind: Literal["date"] = Field(default="date", alias="$type")
    allow_future: bool = True
    allow_past: bool = True
    min_date: str | None = None
    max_date: str | None = None


class TextInputConfig(SchemaModel):
    kind: Literal["textinput"] = Field(default="textinput", alias="$type")
    input_type: Literal["text", "email", "phone", "url"] = "text"
    input_mask: str | None = None
    default_country_code: str | None = None
    validate_on_input: bool = False
    custom_pattern: str | None = None
    autocomplete_hint: str | None = None


class ToggleConfig(SchemaModel):
    kind: Literal["toggle"] = Field(default="toggle", alias="$type")
    on_label: str = "Yes"
    on_label_alt: str | None = "Oui"
    off_label: str = "No"
    off_label_alt: str | None = "Non"
    size: Literal["small", "medium", "large"] = "medium"
    default_value: bool = False


class MatrixRowDefinition(SchemaModel):
    value: str
    text: str
    text_alt: str | None = None
    order: int = 0
    is_visible: bool = True


class MatrixColumnDefinition(SchemaModel):
    value: str
    text: str
    text_alt: str | None = None
    order: int = 0
    cell_type: Literal["radio", "checkbox", "dropdown", "text", "rating"] | None = None
    choices: list["FieldOption"] | None = None


class MatrixConfig(SchemaModel):
    kind: Literal["matrixsingle", "matrixmulti"] = Field(default="matrixsingle", alias="$type")
    rows: list[MatrixRowDefinition] = Field(default_factory=list)
    columns: list[MatrixColumnDefinition] = Field(default_factory=list)
    is_all_row_required: bool = False


TypeConfig = Annotated[
    Union[
        AutoCompleteConfig,
        DataGridConfig,
        FileUploadConfig,
        DateConfig,
        TextInputConfig,
        ToggleConfig,
        MatrixConfig,
    ],
    Field(discriminator="kind"),
]
