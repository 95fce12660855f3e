from typing import NewType

ExchangeName = NewType('ExchangeName', str)
AssetName = NewType('AssetName', str)
