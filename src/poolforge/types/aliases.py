type ChainId = int
type BlockNumber = int
type Gas = int
