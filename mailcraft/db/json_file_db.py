import json
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import Field

from mailcraft.db.db import DBConfig
from mailcraft.db.json_db import Json
from mailcraft.models import MediaItem, MessageItem


def db_config_type():
    return JsonFileDbConfig


class JsonFileDbConfig(DBConfig):
    path: str = Field(alias="PATH")


def get_db(config):
    json_file_db_config = JsonFileDbConfig.model_validate(config)
    return JsonFile(json_file_db_config.path)


def db_from_config(config: JsonFileDbConfig):
    return JsonFile(config.path)


class JsonFile(Json):
    def __init__(self, path: str):
        self.data_file_path = path
        with open(self.data_file_path) as json_file:
            data = json.load(json_file)
            super().__init__(data)
        self.module_name = "json_file_db"
        self.db_name = "JsonFileDb"

    def __save_file(self):
        with open(self.data_file_path, "w") as json_file:
            json.dump(self.data, json_file)

    def save_message(self, message: MessageItem) -> None:
        super().save_message(message)
        self.__save_file()

    @contextmanager
    def edit_media_item(self, media: MediaItem) -> Iterator[MediaItem]:
        with super().edit_media_item(media) as edited:
            yield edited
        self.__save_file()
