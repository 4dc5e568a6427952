from .models import WALK_IN_CUSTOMER, CanonicalAddress, CanonicalContact
from .types import BaseOrder, QuoteCustomer, RawAddress, RawCustomer


def billing_address(order: BaseOrder) -> RawAddress:
    """Billing address, else the customer's default address, else empty."""
    customer = order.customer or RawCustomer()
    return order.billing_address or customer.default_address or RawAddress()


def resolve_contact(order: BaseOrder) -> CanonicalContact:
    """Derive the invoice contact from whichever order fields are present."""
    customer = order.customer or RawCustomer()
    billing = billing_address(order)

    if customer.first_name and customer.last_name:
        name = f"{customer.first_name} {customer.last_name}"
    else:
        name = billing.name or order.customer_name or WALK_IN_CUSTOMER

    addresses = []
    if billing.address1:
        addresses.append(
            CanonicalAddress(
                address_line1=billing.address1,
                address_line2=billing.address2 or "",
                city=billing.city or "",
                region=billing.province or billing.state or "",
                postal_code=billing.zip or "",
                country=billing.country or "",
            )
        )

    return CanonicalContact(
        name=name,
        email_address=order.email or customer.email or billing.email or None,
        phone=billing.phone or None,
        addresses=addresses,
    )


def resolve_quote_contact(customer: QuoteCustomer) -> CanonicalContact:
    return CanonicalContact(
        name=customer.name or WALK_IN_CUSTOMER,
        email_address=customer.email or None,
        phone=customer.phone or None,
    )
