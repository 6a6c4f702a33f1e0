"""Pydantic schemas for bundler options."""

from typing import Any

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

DEFAULT_EXTENSIONS = [".js", ".json", ".mjs", ".ts", ".tsx"]
DEFAULT_DIRECTORIES = ["node_modules"]


class ResolveOptions(BaseModel):
    """Options passed through to module resolution."""

    model_config = ConfigDict(populate_by_name=True)

    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS), description="Extensions probed, in order"
    )
    directories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DIRECTORIES), description="Module directory names searched upward"
    )
    alias: dict[str, str] = Field(
        default_factory=dict, description="Ordered mapping of path regex -> suffix joined onto matching paths"
    )


class BundlerOptions(BaseModel):
    """Complete bundler configuration consumed by the resolver."""

    model_config = ConfigDict(populate_by_name=True)

    exclude: list[str] = Field(default_factory=list, description="Specifiers never resolved")
    ignore: list[str] = Field(default_factory=list, description="Specifiers replaced by an empty module")
    no_parse: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("no_parse", "noParse"),
        description="Specifiers loaded as opaque leaves without parsing",
    )
    parser_options: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("parser_options", "parserOptions", "acornOptions"),
        description="Options handed to the parser",
    )
    resolve: ResolveOptions = Field(default_factory=ResolveOptions)
    add_node_globals: bool = Field(
        default=True,
        validation_alias=AliasChoices("add_node_globals", "addNodeGlobals"),
        description="Satisfy Node built-in specifiers with browser polyfills",
    )
    transforms: list[str] = Field(
        default_factory=list, description="Transform callables as 'package.module:function'"
    )
    base_dir: str | None = Field(
        None,
        validation_alias=AliasChoices("base_dir", "baseDir"),
        description="Directory package lookups start from (defaults to CWD)",
    )

