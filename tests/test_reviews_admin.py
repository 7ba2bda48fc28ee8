from cardshop import models


def test_delete_review(client, admin_headers, db_session, product, revalidator):
    review = models.Review(product_id="prod_1", username="buyer", rating=5, comment="fast delivery")
    db_session.add(review)
    db_session.commit()

    resp = client.delete(f"/admin/reviews/{review.id}", headers=admin_headers)
    assert resp.status_code == 204
    db_session.expire_all()
    assert db_session.query(models.Review).count() == 0
    assert revalidator.calls == [["/admin/reviews"]]


def test_delete_missing_review(client, admin_headers, revalidator):
    resp = client.delete("/admin/reviews/42", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Review not found"
    assert revalidator.calls == []
