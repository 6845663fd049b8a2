# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Sample API descriptions used across the service tests.

A population data service, a news article search service that wraps its
payload in an envelope, and a sunrise/sunset service.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Generic, TypeVar

import msgspec

from tether import API, APIRequest, HTTPMethod, JSONDecoder, ParameterEncoder
from tether.codec import to_snake_case

T = TypeVar("T")


# Population data


class DataEntry(
    msgspec.Struct,
    rename={
        "id_nation": "ID Nation",
        "nation": "Nation",
        "id_year": "ID Year",
        "year": "Year",
        "population": "Population",
        "slug_nation": "Slug Nation",
    },
):
    id_nation: str
    nation: str
    id_year: int
    year: str
    population: int
    slug_nation: str


class DataResponse(msgspec.Struct):
    data: list[DataEntry]


class DataRequest(APIRequest, kw_only=True):
    path = "data"
    response_type = DataResponse

    drilldowns: str
    measures: str


class DataAPI(API):
    base_url = "https://datausa.io/api/"
    default_query_parameters = {"year": "latest"}


# Article search


class Envelope(msgspec.Struct, Generic[T]):
    status: str
    response: T


class Article(msgspec.Struct, rename={"id": "_id"}):
    abstract: str
    web_url: str
    pub_date: datetime
    id: str
    section_name: str | None = None


class ArticleSearchResult(msgspec.Struct, rename={"articles": "docs"}):
    articles: list[Article]


class ArticleSearchRequest(APIRequest, kw_only=True, rename={"query": "q"}):
    path = "articlesearch.json"
    response_type = Envelope[ArticleSearchResult]

    query: str
    filters: str | None = None


class ArticleLookupRequest(APIRequest, kw_only=True):
    path = "articles/{article_id}.json"
    response_type = Envelope[Article]

    article_id: str
    fields: str | None = None


class NewsAPI(API):
    base_url = "https://api.news.example/svc/search/v2/"
    default_query_parameters = {"api-key": "test-key"}


# Sunrise / sunset


class SunriseResults(msgspec.Struct):
    sunrise: datetime
    sunset: datetime
    day_length: int


class SunriseResponse(msgspec.Struct):
    status: str
    results: SunriseResults


class SunriseRequest(
    APIRequest, kw_only=True, rename={"latitude": "lat", "longitude": "lng", "on": "date"}
):
    path = "json"
    response_type = SunriseResponse

    latitude: str
    longitude: str
    on: date | None = None
    formatted: int = 0


class SunriseSunsetAPI(API):
    base_url = "https://api.sunrise-sunset.org/"

    def create_parameter_encoder(self) -> ParameterEncoder:
        return ParameterEncoder(key_strategy=to_snake_case)

    def create_json_decoder(self) -> JSONDecoder:
        return JSONDecoder(key_strategy=to_snake_case)


# Write operations


class Note(msgspec.Struct):
    id: int
    title: str


class CreateNoteRequest(APIRequest, kw_only=True):
    path = "notes"
    method = HTTPMethod.POST
    response_type = Note

    title: str
    tags: list[str] = []


class UpdateNoteRequest(APIRequest, kw_only=True):
    path = "notes/{id}"
    method = HTTPMethod.PUT
    response_type = Note

    id: int
    title: str

    def encode_body(self, encoder):
        return encoder.encode({"title": self.title})


class DeleteNoteRequest(APIRequest, kw_only=True):
    path = "notes/{id}"
    method = HTTPMethod.DELETE

    id: int


class NotesAPI(API):
    base_url = "https://notes.example.com/v1/"
    default_headers = {"Accept": "application/json", "X-Client": "api-default"}
