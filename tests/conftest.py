import pytest

from edogrula.registry import InMemoryBusinessRegistry, InMemoryDenylistRegistry


@pytest.fixture()
def business_records():
    return [
        {
            "_id": "64f1c2a9e4b0a1b2c3d4e5f1",
            "name": "Kule Sapanca",
            "slug": "kule-sapanca",
            "handle": "kule_sapanca",
            "instagramUsername": "@kule_sapanca",
            "instagramUrl": "https://instagram.com/kule_sapanca",
            "website": "https://www.kulesapanca.com",
            "phone": "+905069990554",
        },
        {
            "_id": "64f1c2a9e4b0a1b2c3d4e5f2",
            "name": "Şirince Bağ Evi",
            "slug": "sirince-bag-evi",
            "phone": "05320000000",
            "phones": ["05320000000", "0232 898 30 00"],
        },
    ]


@pytest.fixture()
def blacklist_records():
    return [
        {
            "_id": "64f1c2a9e4b0a1b2c3d4e5f3",
            "name": "Scam Co",
            "businessSlug": "scam-co",
            "instagramUsername": "scamaccount99",
            "instagramUrl": "https://instagram.com/scamaccount99",
            "phone": "0555 111 22 33",
        },
    ]


@pytest.fixture()
def registry(business_records):
    return InMemoryBusinessRegistry(business_records)


@pytest.fixture()
def denylist(blacklist_records):
    return InMemoryDenylistRegistry(blacklist_records)
