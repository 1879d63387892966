from hcl_catalog.data.models import NOT_AVAILABLE, Product


def update_command(product: Product) -> str:
    """Vendor-specific firmware update command line for a product."""
    brand = product.brand.lower()
    device_id = product.id if product.id != NOT_AVAILABLE else "DEVICE_ID"
    if "intel" in brand:
        return f"nvmupdate64e -l log.txt -c nvmupdate.cfg -id {device_id}"
    if "mellanox" in brand or "nvidia" in brand:
        return f"mstflint -d 00:03.0 -i {device_id}.bin burn"
    return f'fw_update_tool --device "{product.model}" --firmware {product.fw}.bin'
