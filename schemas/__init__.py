from .contract_schema import ContractCreate, ContractIdRead, ContractRead
from .payment_schema import PaymentRead, InvoiceRead, PayInvoiceRead
from .wallet_schema import BillingInfoCreate, CashUpdate, PaymentMethodCreate, PaymentMethodRead, WalletRead

__all__ = [
    # Contract
    "ContractCreate", "ContractIdRead", "ContractRead",

    # Invoice / Payment
    "PaymentRead", "InvoiceRead", "PayInvoiceRead",

    # Wallet
    "BillingInfoCreate", "CashUpdate", "PaymentMethodCreate", "PaymentMethodRead", "WalletRead",
]
