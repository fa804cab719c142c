from boutique.utils.local_storage import LocalStorage
from boutique.wishlist.store import STORAGE_KEY, WishlistItem, WishlistStore


def _item(pid="w1"):
    return WishlistItem(id=pid, name="Nautilus", brand="Patek Philippe", price=90000, sale_price=None)


def test_add_is_unique_and_persisted():
    storage = LocalStorage()
    store = WishlistStore(storage)
    assert store.add(_item()) is True
    assert store.add(_item()) is False
    assert len(store.items) == 1
    assert WishlistStore(storage).contains("w1")


def test_remove_and_clear():
    storage = LocalStorage()
    store = WishlistStore(storage)
    store.add(_item("w1"))
    store.add(_item("w2"))
    assert store.remove("w1") is True
    assert store.remove("w1") is False
    store.clear()
    assert store.items == []
    assert WishlistStore(storage).items == []


def test_corrupt_storage_is_treated_as_empty():
    store = WishlistStore(LocalStorage({STORAGE_KEY: "[{broken"}))
    assert store.items == []
    store.add(_item())
    assert store.contains("w1")
