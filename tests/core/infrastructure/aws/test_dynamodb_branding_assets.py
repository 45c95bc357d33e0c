from core.infrastructure.aws.dynamodb_branding_assets import DynamoDBBrandingAssets


def test_missing_asset_returns_none(branding_table):
    assets = DynamoDBBrandingAssets.for_table(branding_table.name)

    assert assets.get_asset("bbff-logo.png") is None


def test_put_then_get(branding_table, logo_bytes):
    assets = DynamoDBBrandingAssets.for_table(branding_table.name)

    assets.put_asset("bbff-logo.png", logo_bytes)

    assert assets.get_asset("bbff-logo.png") == logo_bytes


def test_item_without_data_returns_none(branding_table):
    branding_table.put_item(Item={"asset_name": "hmb-logo.png"})

    assets = DynamoDBBrandingAssets.for_table(branding_table.name)

    assert assets.get_asset("hmb-logo.png") is None
